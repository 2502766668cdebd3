#!/usr/bin/env python3
"""
Smoke test for a running cms-gateway using urllib.request (no external deps)

  BASE_URL=http://127.0.0.1:8000 python scripts/smoke.py
"""
import json
import os
import sys
import urllib.error
import urllib.request

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")


def check(method, path, expected_status, body=None, headers=None, check_json=None):
    """Call an endpoint and report whether status and JSON fields match"""
    data = json.dumps(body).encode("utf-8") if body is not None else None
    req = urllib.request.Request(f"{BASE_URL}{path}", data=data, method=method, headers=headers or {})
    try:
        with urllib.request.urlopen(req) as response:
            status, raw = response.status, response.read()
    except urllib.error.HTTPError as e:
        status, raw = e.code, e.read()
    except urllib.error.URLError as e:
        print(f"❌ {method} {path}: error - {e}")
        return False

    if status != expected_status:
        print(f"❌ {method} {path}: expected status {expected_status}, got {status}")
        return False

    if check_json:
        payload = json.loads(raw.decode("utf-8"))
        for key, expected_value in check_json.items():
            if payload.get(key) != expected_value:
                print(f"❌ {method} {path}: expected {key}={expected_value!r}, got {payload.get(key)!r}")
                return False

    print(f"✅ {method} {path}: status {status}")
    return True


def main():
    """Run all smoke tests"""
    print("🚀 Running smoke tests against", BASE_URL)

    results = [
        check("GET", "/v1/health", 200, check_json={"status": "ok"}),
        check("OPTIONS", "/v1/cms", 200),
        check("POST", "/v1/cms", 401, body={"resource": "pages", "action": "list"},
              check_json={"error": "Missing X-API-Key or X-Tenant-ID header"}),
        check("POST", "/v1/cms", 401, body={"resource": "pages", "action": "list"},
              headers={"X-API-Key": "cms_smoke_invalid", "X-Tenant-ID": "smoke"},
              check_json={"error": "Invalid API key"}),
    ]

    failed = results.count(False)
    if failed > 0:
        print(f"\n❌ {failed} test(s) failed")
        sys.exit(1)
    print("\n✅ All smoke tests passed")


if __name__ == "__main__":
    main()
