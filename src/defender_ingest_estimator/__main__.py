import sys

from defender_ingest_estimator.cli import main

sys.exit(main())
