# main.py

from pathlib import Path
from subprocess import run


def start(cmmd: list[str]) -> None:
    run(cmmd, check=True)


def main() -> None:
    file_path = Path(__file__).resolve()
    uvicorn_path = file_path.parent / ".venv" / "bin" / "uvicorn"
    cmmd = [
        f"{uvicorn_path}",
        "blogcms.main:app",
        "--host",
        "127.0.0.1",
        "--port",
        "8000",
        "--reload",
        "--log-level",
        "info",
        "--loop",
        "uvloop",
    ]
    start(cmmd)


if __name__ == "__main__":
    main()
