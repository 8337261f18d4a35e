import sys

from loguru import logger

import rentcal.settings as settings
from rentcal.config import load_config
from rentcal.errors import RentcalError
from rentcal.export import write_layout, summarize_layout
from rentcal.layout import build_layout, build_week_layout
from rentcal.logger import configure_logging
from rentcal.order_loader import load_orders
from rentcal.status import parse_status_filter
from rentcal.utils import parse_reference_date


def main() -> int:
    # 0) Set up logs
    configure_logging()

    try:
        # 1) Reference date, view and filter
        tz_local = settings.TZ_LOCAL
        logger.debug("Timezone: {}", settings.TIMEZONE)
        reference = parse_reference_date(settings.REFERENCE_DATE, tz_local)
        statuses = parse_status_filter(settings.STATUS_FILTER)
        today = parse_reference_date("today", tz_local)

        # 2) Load config and orders
        config = load_config(settings.CONFIG_PATH)
        orders, load_rejected = load_orders(config["sources"], tz_local)
        logger.info("Loaded {} orders ({} rejected while loading)", len(orders), len(load_rejected))

        # 3) Layout pass
        build = build_week_layout if settings.VIEW == "week" else build_layout
        layout = build(orders, reference, statuses=statuses,
                       firstweekday=settings.FIRST_WEEKDAY, today=today)
        for err in layout.rejected:
            logger.warning("Excluded from grid: {}", err)

        # 4) Export for the renderer
        out = write_layout(layout, settings.OUTPUT_PATH, settings.OUTPUT_FORMAT,
                           overrides=config["statuses"])
        for line in summarize_layout(layout):
            logger.debug("{}", line)
        logger.info("✅ Wrote {} layout for {} to {}", settings.VIEW, layout.header_title, out)
    except RentcalError as e:
        logger.error("{}", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
