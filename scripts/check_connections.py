#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB, Groq and the extraction service are reachable.
Usage: python scripts/check_connections.py
"""
import asyncio

from student_analysis.core.config import get_settings
from student_analysis.db.mongodb import test_mongo_connection
from student_analysis.services.extraction_client import get_extraction_client
from student_analysis.services.llm_client import get_llm_client


async def main():
    settings = get_settings()
    print("=" * 50)
    print("STUDENT ANALYSIS - CONNECTION CHECK")
    print("=" * 50)

    # MongoDB
    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")

    # Extraction service
    print("\n[2] Testing extraction service...")
    print(f"    URL: {settings.extraction_service_url}")
    if await get_extraction_client().is_healthy():
        print("    ✅ Extraction service: CONNECTED")
    else:
        print("    ❌ Extraction service: FAILED (resume/marks will use the LLM-only tier)")

    # Groq (only if API key is set)
    print("\n[3] Testing Groq API...")
    if settings.groq_api_key:
        print(f"    Base URL: {settings.groq_base_url}")
        print(f"    Model: {settings.groq_model}")
        if await get_llm_client().test_connection():
            print("    ✅ Groq: CONNECTED")
        else:
            print("    ❌ Groq: FAILED")
    else:
        print("    ⚠️  Groq: API key not configured (all analyses will use fallback payloads)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(main())
