# examples/01_equal_area_split.py
import logging

import matplotlib.pyplot as plt
from shapely.geometry import Polygon

from polysplit import SplitterConfig
from polysplit.controllers import SplitController
from polysplit.logging_config import setup_logging
from polysplit.utils.plotting import plot_parts


def main():
    # 1. Configuration
    NUM_PARTS = 5
    setup_logging(logging.INFO)

    # 2. Field (concave, so some edge pairs are rejected)
    field = Polygon([(0, 0), (120, 0), (120, 40), (60, 40), (60, 90), (0, 90)])

    # 3. Split
    controller = SplitController(SplitterConfig(parallel=True))
    result = controller.run(field, NUM_PARTS)

    metrics = result["metrics"]
    print(f"Target area per part: {metrics['target_area']:.2f}")
    for i, area in enumerate(metrics["part_areas"]):
        print(f"  -> Part {i + 1}: {area:.2f}")
    print(f"Total cut length: {metrics['total_cut_length']:.2f}")

    # 4. Visualization
    plot_parts(result["parts"], original=field, title=f"{NUM_PARTS} equal-area parts")
    plt.show()


if __name__ == "__main__":
    main()
