import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "shiftbook.main:app",
        host=os.environ.get("SHIFTBOOK_HOST", "127.0.0.1"),
        port=int(os.environ.get("SHIFTBOOK_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
