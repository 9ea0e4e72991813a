from .split_controller import SplitController
