"""Run the studio backend against the test Supabase project. Loads .env.test before starting."""
import sys
from pathlib import Path

from dotenv import load_dotenv

# database.py reads credentials at import time, so load them first
env_path = Path(__file__).parent / ".env.test"
if not env_path.exists():
    print("Error: .env.test not found. Create backend/.env.test with SUPABASE_URL", file=sys.stderr)
    print("and SUPABASE_ANON_KEY for your test Supabase project.", file=sys.stderr)
    sys.exit(1)
load_dotenv(env_path)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
