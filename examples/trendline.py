from __future__ import annotations

import pandas as pd

from neilplot import Plot


def main() -> None:
    frame = pd.DataFrame({"x": [1, 2, 3, 4, 5], "y": [2.2, 2.5, 3.6, 4.7, 5.1]})

    plot = Plot("Foo")
    plot.scatter("x", "y", data=frame).trendline()
    plot.show()


if __name__ == "__main__":
    main()
