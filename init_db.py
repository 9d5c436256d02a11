#!/usr/bin/env python3
"""
Create the BAT collection indexes
"""
import sys
import os

# Add current directory to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

print("=" * 60)
print("🚀 Burnout Assessment Tool - Database Setup")
print("=" * 60)

try:
    from burnout.db import init_database

    print("\n🔄 Creating indexes...")
    print("=" * 60)

    init_database()

    print("\n✅ SETUP SUCCESSFUL!")
    print("\nNext steps:")
    print("1. Start server: uvicorn burnout.main:app --reload --host 0.0.0.0 --port 8000")
    print("2. View API: http://localhost:8000/api/docs")

except ImportError as e:
    print(f"\n❌ Cannot import modules: {e}")
    sys.exit(1)
except Exception as e:
    print(f"\n❌ Setup failed: {e}")
    print("\nTroubleshooting:")
    print("1. Check if MongoDB is running")
    print("2. Check MONGODB_URI in the .env file")
    sys.exit(1)

print("=" * 60)
