from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from neilplot import Plot


def main() -> None:
    parser = argparse.ArgumentParser(description="Scatter a CSV's a/b columns and overlay the a >= 2 rows as a line.")
    parser.add_argument("csv", type=Path)
    parser.add_argument("--out", type=Path, default=None, help="write an image instead of opening a window")
    args = parser.parse_args()

    frame = pd.read_csv(args.csv)

    plot = Plot("Foo")
    plot.x.set_title("X Axis")
    plot.y.set_title("Y Axis").set_min(0.0)
    plot.scatter("a", "b", data=frame)
    filtered = frame[frame["a"] >= 2]
    plot.line("a", "b", data=filtered).set_label("a >= 2")

    if args.out is not None:
        plot.save(args.out)
    else:
        plot.show()


if __name__ == "__main__":
    main()
