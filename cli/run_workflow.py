"""
CLI tool for walking through the quote recommendation workflow.
Usage: python -m cli.run_workflow <insurance_type> [options]
"""

import sys
import json
import time
import argparse
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from quote_advisor.core.random_source import get_random_source
from quote_advisor.pipeline.orchestrator import (
    QuoteWorkflow,
    ScheduleEvent,
    ShowAlert,
    TransitionResult,
    WorkflowState,
)
from quote_advisor.pipeline.steps import (
    QuoteGenerationStep,
    RepresentativeDirectory,
)
from quote_advisor.pipeline.steps.recommendation import rank_quotes
from quote_advisor.utils.formatting import format_currency, format_quote_details, insurance_type_title


# ANSI color codes for terminal output
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def print_header(text: str):
    """Print a header with formatting."""
    print(f"\n{Colors.BOLD}{Colors.BLUE}{text}{Colors.ENDC}")


def print_transition(from_state: WorkflowState, to_state: WorkflowState):
    """Print state machine progress."""
    print(f"  {from_state.value:<26} -> {Colors.GREEN}{to_state.value}{Colors.ENDC}")


def run_effects(workflow: QuoteWorkflow, result: TransitionResult, wait: bool, quiet: bool):
    """Carry out timers and alerts until the workflow settles."""
    while True:
        scheduled = None
        for effect in result.effects:
            if isinstance(effect, ShowAlert) and not quiet:
                color = Colors.RED if effect.level == "error" else Colors.CYAN
                print(f"  {color}{effect.message}{Colors.ENDC}")
            elif isinstance(effect, ScheduleEvent):
                scheduled = effect
        if scheduled is None:
            return result
        if wait:
            time.sleep(scheduled.delay_seconds)
        result = workflow.handle(result.session, scheduled.event)


def print_result(session, budget: float):
    """Print the recommendation, decision and assigned representative."""
    recommendation = session.recommendation
    interested = session.interested_quote

    print("\n" + "=" * 70)
    print(f"{Colors.BOLD}{Colors.GREEN}        QUOTE RECOMMENDATION{Colors.ENDC}")
    print("=" * 70)

    print(f"\n{Colors.BOLD}Quotes compared:{Colors.ENDC}")
    for scored in rank_quotes(session.quotes, session.form_data):
        print(
            f"  - {scored.quote.provider:<18} {format_currency(scored.quote.premium):>12}/month"
            f"  score {scored.total:5.1f}"
        )

    print(f"\n{Colors.BOLD}Your choice:{Colors.ENDC}")
    print("  " + format_quote_details(interested).replace("\n", "\n  "))

    print(f"\n{Colors.BOLD}Our recommendation (score {recommendation.score}/100):{Colors.ENDC}")
    print("  " + format_quote_details(recommendation.recommended_quote).replace("\n", "\n  "))
    for reason in recommendation.reasons:
        print(f"  {Colors.GREEN}+{Colors.ENDC} {reason}")
    if recommendation.recommended_quote.premium > budget:
        print(f"  {Colors.YELLOW}Above your budget of {format_currency(budget)}{Colors.ENDC}")

    interest = session.quote_interest
    print(f"\n{Colors.BOLD}Decision:{Colors.ENDC} {session.user_choice} ({interest.status})")
    print(f"{Colors.BOLD}Reference ID:{Colors.ENDC} {session.user_id}")
    print(f"{Colors.BOLD}Interest ID:{Colors.ENDC} {interest.id}")

    rep = session.representative
    print(f"\n{Colors.BOLD}Your representative:{Colors.ENDC} {rep.full_name} <{rep.email}>")
    print(f"  Rating {rep.rating:g}/5, {rep.active_clients} active clients")
    assignment = session.assignment
    print(
        f"  {Colors.CYAN}Expect feedback within {assignment.expected_response_days} business days "
        f"(by {assignment.respond_by:%Y-%m-%d}){Colors.ENDC}"
    )


def build_form(args) -> dict:
    return {
        "applicant": {
            "firstName": args.first_name,
            "lastName": args.last_name,
            "email": args.email,
            "phone": args.phone,
        },
        "needsAnalysis": {
            "budgetPreferences": {"maxMonthlyPremium": args.budget},
        },
    }


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compare insurance quotes and get a recommendation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cli.run_workflow auto --budget 1000
  python -m cli.run_workflow home --pick 2 --choice change
  python -m cli.run_workflow life --seed 7 --json
        """
    )

    parser.add_argument("insurance_type", help="Insurance line, e.g. auto, home, life")
    parser.add_argument("--budget", "-b", type=float, default=1000, help="Maximum monthly premium")
    parser.add_argument("--pick", "-p", type=int, default=1, help="Quote to mark as interested (1-based)")
    parser.add_argument(
        "--choice", "-c",
        choices=["proceed", "change"],
        default="proceed",
        help="Keep your quote or switch to the recommendation"
    )
    parser.add_argument("--seed", "-s", type=int, help="Random seed for reproducible quotes")
    parser.add_argument("--first-name", default="Demo")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--email", default="demo@example.com")
    parser.add_argument("--phone", default="0820000000")
    parser.add_argument("--no-wait", action="store_true", help="Skip the simulated delays")
    parser.add_argument("--json", "-j", action="store_true", help="Output final session as JSON only")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress progress output")

    args = parser.parse_args()
    verbose = not args.quiet and not args.json

    random_source = get_random_source(args.seed)
    workflow = QuoteWorkflow(
        generator=QuoteGenerationStep(random_source=random_source),
        directory=RepresentativeDirectory(random_source=random_source),
        transition_callback=print_transition if verbose else None,
    )

    if verbose:
        print_header(f"{insurance_type_title(args.insurance_type)} quote workflow")
        print("-" * 40)

    try:
        session = workflow.start()
        result = workflow.select_insurance_type(session, args.insurance_type)
        result = run_effects(workflow, result, not args.no_wait, not verbose)

        result = workflow.submit_quote_form(result.session, build_form(args))
        result = run_effects(workflow, result, not args.no_wait, not verbose)
        if result.session.state == WorkflowState.QUOTE_INTAKE:
            sys.exit(1)

        if result.session.state == WorkflowState.THANK_YOU:
            result = workflow.generate_quotes(result.session)
            result = run_effects(workflow, result, not args.no_wait, not verbose)

        session = result.session
        if not session.quotes:
            print(f"{Colors.RED}Error: No providers quote {insurance_type_title(args.insurance_type)}{Colors.ENDC}")
            sys.exit(1)
        if not 1 <= args.pick <= len(session.quotes):
            print(f"{Colors.RED}Error: --pick must be between 1 and {len(session.quotes)}{Colors.ENDC}")
            sys.exit(1)

        result = workflow.mark_interested(session, session.quotes[args.pick - 1])
        result = workflow.choose(result.session, args.choice)
        result = workflow.confirm(result.session)
        final = result.session

        if args.json:
            print(json.dumps(final.model_dump(mode="json"), indent=2))
        else:
            print_result(final, args.budget)

        workflow.close(final)
        sys.exit(0)

    except Exception as e:
        if args.json:
            print(json.dumps({"success": False, "error": str(e)}))
        else:
            print(f"\n{Colors.RED}Error: {e}{Colors.ENDC}")
        sys.exit(1)


if __name__ == "__main__":
    main()
