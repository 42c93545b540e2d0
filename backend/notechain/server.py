"""NoteChain Server — launch the API with uvicorn.

Usage:
    notechain-api                    # Development (auto-reload)
    notechain-api --prod             # Production mode
    notechain-api --port 8080        # Custom port

Invariants:
    - Always a single worker: the chain lives in process memory, and two workers
      would each seal their own divergent chain
"""

import argparse


def main():
    parser = argparse.ArgumentParser(description="NoteChain API Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    parser.add_argument("--prod", action="store_true", help="Production mode")
    args = parser.parse_args()

    import uvicorn

    uvicorn.run(
        "notechain.main:app",
        host=args.host,
        port=args.port,
        reload=not args.prod,
        workers=1,
        log_level="info",
    )


if __name__ == "__main__":
    main()
