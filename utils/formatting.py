def locale_date(moment):
    """Date in the user's locale, local timezone."""
    return moment.astimezone().strftime("%x")


def format_currency(value):
    return f"${value:,.2f}"


def backup_filename(moment):
    return f"naqshi-gold-backup-{moment.strftime('%Y-%m-%d')}.json"
