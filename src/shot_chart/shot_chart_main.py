import argparse
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from shot_chart.interactive_chart import InteractiveShotChart
from shot_chart.settings import DEBUG, DEFAULT_COLUMNS, LOG_FORMAT, SHOT_DATA_CSV

logger = logging.getLogger(__name__)


def load_shots_csv(path, columns=None) -> pd.DataFrame:
    """Read the shot CSV as strings so coercion happens in one place (the normalizer)."""
    path = Path(path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"No shot data found at {path}")
    shots = pd.read_csv(path, dtype=str, keep_default_na=False)
    logger.info(f"Loaded {len(shots)} rows from {path}")

    expected = set((columns or DEFAULT_COLUMNS).values())
    missing = sorted(expected - set(shots.columns))
    if missing:
        logger.warning(f"Columns missing from {path.name}: {missing}; those fields will be empty")
    return shots


def run_chart(csv_path, title=None, columns=None, show=True):
    """Build and mount the chart for ``csv_path``; blocks in the GUI loop when ``show``."""
    shots = load_shots_csv(csv_path, columns)
    chart = InteractiveShotChart(shots, columns, title or f"{Path(csv_path).stem} Shot Chart")
    chart.mount()
    if show:
        try:
            plt.show()
        finally:
            chart.unmount()
    return chart


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive NBA shot chart with a linked distance histogram.")
    parser.add_argument("--csv", default=str(SHOT_DATA_CSV), help="Shot data CSV (default: %(default)s)")
    parser.add_argument("--title", default=None, help="Chart title")
    parser.add_argument("--debug", action="store_true", default=DEBUG, help="Verbose logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format=LOG_FORMAT)
    # matplotlib's own debug output drowns everything else
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    run_chart(args.csv, args.title)


if __name__ == "__main__":
    main()
