#!/usr/bin/env python3
"""
Check that SOLAPI_API_KEY / SOLAPI_SECRET_KEY are accepted (signed balance query). Sends nothing.
Run: cd backend && python scripts/check_sms.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from speetto_monitor.config import settings
from speetto_monitor.services.sms import create_sms_client


def main() -> int:
    client = create_sms_client(settings)
    if client is None:
        print("FAIL SOLAPI credentials not configured (SOLAPI_API_KEY, SOLAPI_SECRET_KEY in backend/.env)")
        return 1
    if client.validate_credentials():
        print("OK  SOLAPI credentials accepted")
        return 0
    print("FAIL SOLAPI rejected the credentials (see log above)")
    return 1


if __name__ == "__main__":
    sys.exit(main())
