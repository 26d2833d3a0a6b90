#!/usr/bin/env python3
"""
Simplified script to run the Notion space export.
"""

from notion_export.main import main

if __name__ == "__main__":
    print("🚀 Starting Notion Export")
    print("📋 For more information see README.md")
    print()
    main()
