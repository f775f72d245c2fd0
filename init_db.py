"""Print the Supabase schema for the mock test platform (paste into the Supabase SQL Editor)."""
import argparse
import os

from dotenv import load_dotenv

from mocktest.schema import EXTENDED_SCHEMA_SQL, SCHEMA_SQL, statements


def build_script(extended: bool = False) -> str:
    return SCHEMA_SQL + (EXTENDED_SCHEMA_SQL if extended else "")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print the mock test database schema.")
    parser.add_argument("--extended", action="store_true", help="Include test_sessions, admin_users and system_config")
    args = parser.parse_args(argv)

    load_dotenv()
    sql = build_script(args.extended)

    print("Initializing Supabase schema...")
    print(f"URL: {os.getenv('SUPABASE_URL') or '(SUPABASE_URL not set)'}")
    stmts = statements(sql)
    for i, stmt in enumerate(stmts, 1):
        first = next((line for line in stmt.splitlines() if line and not line.startswith("--")), stmt)
        print(f"  {i:2d}/{len(stmts)}  {first[:60]}...")

    print("\nNote: Due to Supabase client limitations, run this SQL in Supabase SQL Editor:")
    print(sql)


if __name__ == "__main__":
    main()
