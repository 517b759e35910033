import sys

from weather_aggregator.cli import main

sys.exit(main())
