"""Character Creator dev launcher. Starts the API server in watch mode."""

import argparse
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Character Creator dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Wipe and create demo characters, folders and relationships")
    parser.add_argument("--repair", action="store_true",
                        help="Drop corrupt stored entries and exit")
    args = parser.parse_args()

    if args.demo or args.repair or args.data_dir:
        from char_creator.storage import CharacterLibrary
        data_dir = args.data_dir or Path(os.getenv("DATA_DIR", "data"))
        library = CharacterLibrary.open(data_dir)
        if args.repair:
            report = library.repair()
            print(f"Repaired {data_dir}: {report}")
            return
        if args.demo:
            from char_creator.demo import create_demo_data
            create_demo_data(library)

    # Build env for the server so it picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    print(f"Starting API on http://localhost:{PORT} ...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "char_creator.app:app", "--reload",
         "--host", HOST, "--port", PORT],
        cwd=ROOT, env=env,
    )
    try:
        proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        proc.terminate()
        proc.wait()


if __name__ == "__main__":
    main()
