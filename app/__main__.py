"""CLI entry point for the Deal Marketplace buyer matcher."""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from app.config import settings
from app.models import CompanyProfile, Deal, MatchResult
from app.models.database import DealNotFoundError, DealRepository, init_db, load_fixtures
from app.score import BuyerMatchScorer

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_json(path: Path):
    """Load a JSON document from disk."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_deal(path: Path) -> Deal:
    """Load a deal from a JSON file."""
    return Deal.model_validate(load_json(path))


def load_profiles(path: Path) -> list[CompanyProfile]:
    """Load company profiles from a JSON array (or {"companyProfiles": [...]})."""
    data = load_json(path)
    if isinstance(data, dict):
        data = data.get("companyProfiles", [])
    return [CompanyProfile.model_validate(item) for item in data]


def run_match(
    deal_path: Optional[Path] = None,
    profiles_path: Optional[Path] = None,
    deal_id: Optional[str] = None,
    output_path: Optional[Path] = None,
    db_url: Optional[str] = None,
) -> list[MatchResult]:
    """Rank buyer profiles for a deal from JSON files or from the database."""
    scorer = BuyerMatchScorer()

    if deal_id:
        logger.info(f"Loading deal {deal_id} from database...")
        SessionLocal = init_db(db_url)
        session = SessionLocal()
        try:
            repo = DealRepository(session)
            deal = repo.get_deal(deal_id)
            results = scorer.match(deal, repo.list_candidate_profiles(deal))
        finally:
            session.close()
    else:
        deal = load_deal(deal_path)
        profiles = load_profiles(profiles_path)
        logger.info(f"Loaded {len(profiles)} company profiles from {profiles_path}")
        results = scorer.match(deal, profiles)

    logger.info(f"{len(results)} matching buyers for deal {deal.title or deal.id}")

    if output_path:
        export_to_csv(results, output_path)
        logger.info(f"Results exported to {output_path}")

    print_summary(deal, results)
    return results


def export_to_csv(results: list[MatchResult], output_path: Path):
    """Export results to CSV file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)

        # Header
        writer.writerow([
            "Rank",
            "Company",
            "Buyer ID",
            "Buyer",
            "Buyer Email",
            "Match Score",
            "Match Percentage",
            "Matched Criteria",
        ])

        # Data rows
        for rank, r in enumerate(results, 1):
            writer.writerow([
                rank,
                r.company_name,
                r.buyer_id or "",
                r.buyer_name or "",
                r.buyer_email or "",
                r.total_match_score,
                r.match_percentage,
                "; ".join(r.matched_criteria()),
            ])


def print_summary(deal: Deal, results: list[MatchResult]):
    """Print a summary of results to console."""
    print("\n" + "=" * 60)
    print("MATCHING BUYERS")
    print("=" * 60)

    print(f"\nDeal: {deal.title or deal.id}")
    print(f"Industry: {deal.industry_sector} | Geography: {deal.geography_selection}")
    print(f"Matching buyers: {len(results)}")

    if results:
        print("\n" + "-" * 60)
        print("TOP 10 BUYERS")
        print("-" * 60)

        for rank, r in enumerate(results[:10], 1):
            print(f"\n#{rank} {r.company_name}")
            print(f"   Match: {r.match_percentage}% ({r.total_match_score} points)")
            if r.buyer_name or r.buyer_email:
                print(f"   Buyer: {r.buyer_name or ''} <{r.buyer_email or ''}>")
            print(f"   Matched: {', '.join(r.matched_criteria())}")

    print("\n" + "=" * 60)


def run_load(fixtures_path: Path, db_url: Optional[str] = None) -> dict[str, int]:
    """Load buyers, deals and company profiles into the database."""
    SessionLocal = init_db(db_url)
    session = SessionLocal()
    try:
        return load_fixtures(session, load_json(fixtures_path))
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deal Marketplace - Rank buyer profiles against a deal"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help=f"Database URL (default: {settings.database_url})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", help="Rank buyers for a deal")
    match_parser.add_argument(
        "--deal", "-d",
        type=Path,
        help="Path to deal JSON file",
    )
    match_parser.add_argument(
        "--profiles", "-p",
        type=Path,
        help="Path to company profiles JSON file",
    )
    match_parser.add_argument(
        "--deal-id",
        help="Read the deal and candidate profiles from the database instead",
    )
    match_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Optional output CSV path",
    )

    load_parser = subparsers.add_parser("load", help="Load fixtures into the database")
    load_parser.add_argument(
        "fixtures",
        type=Path,
        help="JSON file with buyers, deals and companyProfiles arrays",
    )
    return parser


def main(argv: Optional[list[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.command == "load":
            if not args.fixtures.exists():
                logger.error(f"Fixtures file not found: {args.fixtures}")
                sys.exit(1)
            run_load(args.fixtures, args.db_url)
            return

        if not args.deal_id and not (args.deal and args.profiles):
            parser.error("match needs --deal-id, or both --deal and --profiles")

        for path in (args.deal, args.profiles):
            if path and not path.exists():
                logger.error(f"File not found: {path}")
                sys.exit(1)

        run_match(
            deal_path=args.deal,
            profiles_path=args.profiles,
            deal_id=args.deal_id,
            output_path=args.output,
            db_url=args.db_url,
        )
    except DealNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Matching failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
