"""
Catalog Utilities

FLOW OVERVIEW
- list_jerseys() / featured_jerseys() / get_jersey(id): backend reads, newest first.
- filter_jerseys(...): in-memory linear filter over an already-fetched list
  (search, league, team, availability).
- catalog_facets(...): distinct leagues and teams for filter dropdowns.
"""

from ..models import db, Jersey

ALL = 'all'
AVAILABILITY_AVAILABLE = 'available'
AVAILABILITY_OUT_OF_STOCK = 'out-of-stock'


def list_jerseys():
    """All jerseys, newest first"""
    return Jersey.query.order_by(Jersey.created_at.desc(), Jersey.id.desc()).all()


def featured_jerseys(limit=None):
    """Featured jerseys for the home page"""
    query = Jersey.query.filter_by(is_featured=True).order_by(Jersey.created_at.desc(), Jersey.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_jersey(jersey_id):
    """Single jersey or None; ids arriving as strings from forms are coerced"""
    try:
        jersey_id = int(jersey_id)
    except (TypeError, ValueError):
        return None
    return db.session.get(Jersey, jersey_id)


def filter_jerseys(jerseys, search=None, league=ALL, team=ALL, availability=ALL):
    """
    Filter a list of jerseys the way the catalog page does

    Args:
        jerseys: Jerseys to filter
        search: Case-insensitive substring of name, team or league
        league: Exact league, or "all"
        team: Exact team, or "all"
        availability: "all", "available" or "out-of-stock"

    Returns:
        Filtered list, original order preserved
    """
    filtered = list(jerseys)

    if search:
        term = search.strip().lower()
        filtered = [
            j for j in filtered
            if term in (j.name or '').lower()
            or term in (j.team or '').lower()
            or term in (j.league or '').lower()
        ]

    if league and league != ALL:
        filtered = [j for j in filtered if j.league == league]

    if team and team != ALL:
        filtered = [j for j in filtered if j.team == team]

    if availability == AVAILABILITY_AVAILABLE:
        filtered = [j for j in filtered if j.is_available]
    elif availability == AVAILABILITY_OUT_OF_STOCK:
        filtered = [j for j in filtered if not j.is_available]

    return filtered


def catalog_facets(jerseys):
    """Distinct leagues and teams, first-seen order"""
    leagues = list(dict.fromkeys(j.league for j in jerseys))
    teams = list(dict.fromkeys(j.team for j in jerseys))
    return {'leagues': leagues, 'teams': teams}
