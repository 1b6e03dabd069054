"""
Deployment Verification

Polls the public endpoints of a running NeoRide API and prints a summary.

Base URL, first match wins:
  1. first command-line argument
  2. "vercelUrl" in ./deployment-config.json
  3. http://localhost:3001
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_BASE_URL = "http://localhost:3001"
CONFIG_FILE = Path("deployment-config.json")

ENDPOINTS = [
    "/",
    "/api/health",
    "/api/debug",
    "/api/stats",
]


def resolve_base_url(argv: List[str]) -> str:
    if len(argv) > 1:
        return argv[1].rstrip("/")

    if CONFIG_FILE.exists():
        try:
            config = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
            if config.get("vercelUrl"):
                return config["vercelUrl"].rstrip("/")
        except (OSError, ValueError) as e:
            print(f"Error reading config file: {e}")

    return DEFAULT_BASE_URL


async def check_endpoint(client: httpx.AsyncClient, endpoint: str) -> Dict[str, Any]:
    result: Dict[str, Any] = {"endpoint": endpoint}
    try:
        response = await client.get(endpoint)
    except httpx.TimeoutException:
        result.update(status="TIMEOUT", error="Request timed out")
        return result
    except httpx.HTTPError as e:
        result.update(status="ERROR", error=str(e))
        return result

    result["status"] = response.status_code
    try:
        result["data"] = response.json()
    except ValueError:
        result["error"] = "Invalid JSON response"
    return result


def report(result: Dict[str, Any]) -> None:
    endpoint = result["endpoint"]
    status = result["status"]
    data: Optional[Dict[str, Any]] = result.get("data")

    if status == 200:
        print(f"✅ {endpoint} - Status: {status}")
    else:
        error = result.get("error") or (data or {}).get("error") or "Unknown error"
        print(f"❌ {endpoint} - Status: {status} - Error: {error}")

    # Health reports the database link even on failure
    if endpoint == "/api/health" and isinstance(data, dict):
        if data.get("connected"):
            print("   💾 MongoDB connection: ✅ Connected")
        else:
            print("   💾 MongoDB connection: ❌ Not connected")
            print(f"   Error: {data.get('error', 'Unknown error')}")
    print("-----------------------------------")


async def main(argv: List[str]) -> int:
    base_url = resolve_base_url(argv)
    print("🧪 Verifying NeoRide Backend API Deployment...")
    print(f"🔗 Testing endpoints on {base_url}")
    print("-----------------------------------")

    results = []
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        for endpoint in ENDPOINTS:
            print(f"🔍 Testing endpoint: {endpoint}")
            result = await check_endpoint(client, endpoint)
            report(result)
            results.append(result)

    successful = sum(1 for r in results if r["status"] == 200)
    print("\n📊 Test Summary:")
    print(f"✅ Successful: {successful}/{len(ENDPOINTS)}")
    print(f"❌ Failed: {len(ENDPOINTS) - successful}/{len(ENDPOINTS)}")

    if successful == len(ENDPOINTS):
        print("\n🎉 All endpoints are working!")
        return 0

    print("\n⚠️ Some endpoints failed. Check MONGODB_URI and the deployment logs.")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv)))
