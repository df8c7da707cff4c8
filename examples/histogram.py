from __future__ import annotations

import numpy as np
import pandas as pd

from neilplot import Plot


def main() -> None:
    rng = np.random.default_rng(7)
    frame = pd.DataFrame({"rand": np.floor(rng.standard_normal(1000) * 10).astype(np.int32)})
    counts = frame.groupby("rand").size().sort_index()

    plot = Plot("Foo")
    plot.x.set_title("Label")
    plot.y.set_title("Counts")
    plot.histogram_counted(counts.to_numpy())
    plot.show()


if __name__ == "__main__":
    main()
