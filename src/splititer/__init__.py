from splititer.util.iterators import split, partition, Split, Splittable, Side, SplitPoisonedError
from splititer.util.config import configure_logger, get_config
