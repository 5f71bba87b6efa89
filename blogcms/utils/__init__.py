from blogcms.utils.helpers import host, slugify, time_taken, today_str, utc_now

__all__ = ["host", "slugify", "time_taken", "today_str", "utc_now"]
