"""Allow running tfmerge with `python -m tfmerge`."""

from tfmerge import main

main()
