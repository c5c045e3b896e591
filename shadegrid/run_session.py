"""Scripted player: start a session on a running server and play it to the end."""

import argparse
import json
import random
import sys
import time

import requests

DEFAULT_SERVER = "http://127.0.0.1:8000"


def _post(url: str, body: dict | None = None) -> dict:
    resp = requests.post(url, json=body or {}, timeout=30)
    _raise_for_error(resp)
    return resp.json()


def _get(url: str) -> dict:
    resp = requests.get(url, timeout=30)
    _raise_for_error(resp)
    return resp.json()


def _raise_for_error(resp: requests.Response) -> None:
    if resp.ok:
        return
    try:
        err_body = resp.json()
        print(
            f"Server error ({resp.status_code}): {err_body.get('detail', resp.text)}",
            file=sys.stderr,
        )
    except ValueError:
        print(resp.text, file=sys.stderr)
    resp.raise_for_status()


def choose_index(state: dict, accuracy: float, rng: random.Random) -> int:
    """Return diff_index with probability accuracy, otherwise some other cell."""
    cells = state["grid_size"] * state["grid_size"]
    answer = state["diff_index"]
    if rng.random() < accuracy:
        return answer
    wrong = rng.randrange(cells - 1)
    return wrong if wrong < answer else wrong + 1


def play(
    server: str,
    accuracy: float,
    seed: int | None = None,
    delay: float = 0.5,
    max_moves: int | None = None,
) -> dict:
    """Play one session until it ends (or max_moves picks); return the report."""
    rng = random.Random(seed)
    base = server.rstrip("/")
    body = {"seed": seed} if seed is not None else {}
    state = _post(f"{base}/api/session", body)
    session_id = state["session_id"]
    moves = 0
    while state["status"] == "playing":
        if max_moves is not None and moves >= max_moves:
            break
        index = choose_index(state, accuracy, rng)
        out = _post(f"{base}/api/session/{session_id}/select", {"index": index})
        state = out["session"]
        moves += 1
        if delay > 0:
            time.sleep(delay)
    return _get(f"{base}/api/session/{session_id}/report")


def main() -> None:
    """CLI entrypoint: play a session against the server and print the report."""
    parser = argparse.ArgumentParser(description="Play a shadegrid session with a scripted player")
    parser.add_argument(
        "--server",
        default=DEFAULT_SERVER,
        help=f"Server base URL (default: {DEFAULT_SERVER})",
    )
    parser.add_argument(
        "--accuracy",
        type=float,
        default=0.8,
        help="Probability of picking the odd cell on each move (default: 0.8)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for rounds and player")
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        metavar="S",
        help="Seconds to wait between picks (default: 0.5)",
    )
    parser.add_argument(
        "--max-moves",
        type=int,
        default=None,
        metavar="N",
        help="Stop after N picks even if the clock is still running",
    )
    args = parser.parse_args()
    if not 0.0 <= args.accuracy <= 1.0:
        print(f"--accuracy must be in [0, 1], got {args.accuracy}", file=sys.stderr)
        sys.exit(1)

    report = play(args.server, args.accuracy, args.seed, args.delay, args.max_moves)
    print(json.dumps(report, indent=2))
    print(f" score={report['score']} level={report['level']} rank={report['rank']}")


if __name__ == "__main__":
    main()
