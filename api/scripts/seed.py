import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from private_dating.engine import build_engine
from private_dating.services.seeding import seed_demo_users


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a synthetic matchmaking round against a fresh engine")
    parser.add_argument("--n-users", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--request-rate", type=float, default=0.3)
    parser.add_argument("--accept-all", action="store_true")
    parser.add_argument("--reveal", action="store_true", help="deliver queued reveals from the local co-processor")
    args = parser.parse_args()

    engine = build_engine(listeners=[])
    summary = seed_demo_users(
        engine,
        n_users=args.n_users,
        seed=args.seed,
        request_rate=args.request_rate,
        accept_all=args.accept_all,
    )
    if args.reveal:
        revealed = 0
        for response in engine.state.ops.coprocessor.drain():
            if engine.on_revealed(response.correlation_id, response.cleartext, response.proof):
                revealed += 1
        summary["revealed_scores"] = revealed

    print("Seed completed")
    for k, v in summary.items():
        print(f"- {k}: {v}")


if __name__ == "__main__":
    main()
