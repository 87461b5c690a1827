import os

import uvicorn

SERVER_HOST = os.environ.get("DATADECK_HOST", "127.0.0.1")
SERVER_PORT = int(os.environ.get("DATADECK_PORT", "8000"))


def main() -> None:
    from datadeck.api.app import app

    print(f"Starting datadeck at http://{SERVER_HOST}:{SERVER_PORT}")
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    main()
