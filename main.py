"""StudyScout - learning resource finder

Simple CLI for building a resource bundle for one topic.
"""

import argparse
import asyncio
import json
import sys

from studyscout.agents.orchestrator import ResourceOrchestrator
from studyscout.errors import ConfigurationMissing, QuerySynthesisFailed
from studyscout.llm_client import get_client


async def run_query(query: str, model: str | None = None) -> int:
    """Run the pipeline for ``query`` and print the bundle."""
    print(f"Topic: {query}", file=sys.stderr)
    print("-" * 50, file=sys.stderr)

    try:
        orchestrator = ResourceOrchestrator.from_client(get_client(model=model))
        result = await orchestrator.run(query)
    except ConfigurationMissing as e:
        print(f"[!] {e.message}", file=sys.stderr)
        return 2
    except QuerySynthesisFailed as e:
        print(f"[!] {e.reason}", file=sys.stderr)
        if e.raw_text:
            print(e.raw_text, file=sys.stderr)
        return 1

    bundle = result.bundle
    print(f"[+] {len(bundle.videos)} videos, {len(bundle.articles)} articles", file=sys.stderr)
    payload = {
        "intro": bundle.intro,
        "videos": [
            {"title": v.title, "link": v.link, "summary": v.summary} for v in bundle.videos
        ],
        "articles": [
            {"title": a.title, "link": a.link, "summary": a.summary, "image": a.image}
            for a in bundle.articles
        ],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def main():
    parser = argparse.ArgumentParser(description="StudyScout learning resource finder")
    parser.add_argument("--query", "-q", required=True, help="Topic to learn about")
    parser.add_argument("--model", "-m", help="Model to use (default: from config)")

    args = parser.parse_args()

    sys.exit(asyncio.run(run_query(args.query, args.model)))


if __name__ == "__main__":
    main()
