# finance_tracker/core/categorizer.py
def categorize(text, categories_map, default=None):
    name = str(text or '').lower()
    for cat, keywords in categories_map.items():
        for kw in keywords or []:
            if kw.lower() in name:
                return cat
    return default
