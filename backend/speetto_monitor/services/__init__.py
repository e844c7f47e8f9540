"""
Monitoring services: speetto (source page + extraction), sms (SOLAPI),
alert_state_service (store), monitoring_service (one run).
"""
