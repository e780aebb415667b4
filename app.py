import argparse
import logging
import sys

from aidmap.backend import CollectionClient
from aidmap.config import DEFAULT_OUTPUT_HTML, Settings
from aidmap.exceptions import ConfigError
from aidmap.export import write_markers_csv
from aidmap.logging_utils import setup_logging
from aidmap.map_create import save_map
from aidmap.widget import MapWidget

logger = logging.getLogger("aidmap.app")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Render the resource map to a standalone HTML page.")
    p.add_argument("-o", "--output", default=DEFAULT_OUTPUT_HTML, help="HTML output path")
    p.add_argument("--lat", type=float, help="viewer latitude to center on")
    p.add_argument("--lon", type=float, help="viewer longitude to center on")
    p.add_argument("--csv", help="also write every marker to this CSV file")
    p.add_argument("--log-level", help="logging level (default from AIDMAP_LOG_LEVEL)")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        setup_logging(args.log_level or settings.log_level)
        client = CollectionClient.from_settings(settings)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    widget = MapWidget(client)
    try:
        widget.mount(wait=True)
        if args.lat is not None or args.lon is not None:
            widget.set_location({"latitude": args.lat, "longitude": args.lon})

        out_html = save_map(widget.render(), args.output)
        print(f"Map written to {out_html}")
        for key, markers in widget.markers().items():
            print(f"  {key}: {len(markers)} markers")
        if args.csv:
            print(f"Markers written to {write_markers_csv(widget.stores, args.csv)}")
    finally:
        widget.unmount()
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
