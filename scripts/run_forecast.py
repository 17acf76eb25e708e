import sys
import json
import argparse
from datetime import date, timedelta
from pathlib import Path
# Ensure project root is on sys.path so 'app' package can be imported when running this script directly
sys.path.append(str(Path(__file__).resolve().parents[1]))
from app.core.data_loader import BacklogLoader, parse_throughput_values
from app.core.dates import calculate_days_from_now, calculate_working_days, format_date
from app.core.simulator import simulate
from app.models.simulation import SimulationParameters


def main():
    parser = argparse.ArgumentParser(description="Forecast a backlog JSON file from the command line.")
    parser.add_argument("backlog", help="Path to a backlog JSON file ({\"slices\": [...], \"groups\": [...]})")
    parser.add_argument("--throughput", default="10, 12, 8, 15, 11", help="Historical slices per week, comma separated")
    parser.add_argument("--throughput-min", type=float, default=1.0, help="Weekly throughput used when no history is given")
    parser.add_argument("--throughput-max", type=float, default=None)
    parser.add_argument("--split", type=float, nargs=2, default=(1.0, 2.0), metavar=("MIN", "MAX"))
    parser.add_argument("--uncertainty", type=float, default=0.1)
    parser.add_argument("--deadline-days", type=int, default=90)
    parser.add_argument("--include-done", action="store_true")
    parser.add_argument("--ignore-risk", action="store_true")
    parser.add_argument("--iterations", type=int, default=500)
    args = parser.parse_args()

    loader = BacklogLoader.from_json(Path(args.backlog).read_text())
    count_min, count_max = loader.slice_count_range(args.include_done)
    start = date.today()

    params = SimulationParameters(
        sliceCountMin=count_min,
        sliceCountMax=count_max,
        splitFactorMin=args.split[0],
        splitFactorMax=args.split[1],
        throughputValues=parse_throughput_values(args.throughput),
        throughputMin=args.throughput_min,
        throughputMax=args.throughput_max,
        uncertaintyFactor=args.uncertainty,
        risk=loader.risk(args.include_done),
        ignoreRisk=args.ignore_risk,
        startDate=start,
        deadlineDate=start + timedelta(days=args.deadline_days),
        iterations=args.iterations,
    )
    result = simulate(params)

    print(f"Deadline: {format_date(params.deadlineDate)} ({result.deadlineDays} days from start, "
          f"{calculate_working_days(params.startDate, params.deadlineDate)} working days, "
          f"{calculate_days_from_now(params.deadlineDate)} days from now)")
    print(f"Probability to meet deadline: {result.probability * 100:.1f}%")
    print(f"Expected delivery:  {format_date(result.expectedDate)} ({result.average} days)")
    print(f"90% confidence:     {format_date(result.p90Date)} ({result.p90} days)")
    print(json.dumps(loader.status_breakdown().model_dump(), indent=2))


if __name__ == "__main__":
    main()
