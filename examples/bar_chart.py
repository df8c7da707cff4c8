from __future__ import annotations

import pandas as pd

from neilplot import Plot


def main() -> None:
    frame = pd.DataFrame({"label": ["A", "B", "C", "D"], "value": [10, 20, 15, 25]})

    plot = Plot("Foo")
    plot.x.set_title("Label")
    plot.y.set_title("Counts")
    plot.bar_chart("label", "value", data=frame)
    plot.show()


if __name__ == "__main__":
    main()
