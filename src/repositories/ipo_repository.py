from datetime import datetime

from config import setup_logger
from utils import StoreManager, generate_safe_key, IPO_STATUSES

logger = setup_logger(name="IPORepository")

IPOS_KEY = "ipos"


class IPORepository:

    def __init__(self, store=None):
        self._store = store

    @property
    def store(self):
        return self._store or StoreManager.get_store()

    def _ipos(self):
        return self.store.load(IPOS_KEY, {})

    @staticmethod
    def _key_for(name, stored):
        key = generate_safe_key(name)
        existing = stored.get(key)
        if not existing or existing.get("company_name") == name:
            return key
        # Two different names collapsed to the same key
        for stored_key, ipo in stored.items():
            if ipo.get("company_name") == name:
                return stored_key
        suffix = 2
        while generate_safe_key(name, fallback_id=str(suffix), existing_keys=stored) in stored:
            suffix += 1
        return generate_safe_key(name, fallback_id=str(suffix), existing_keys=stored)

    def save_ipos(self, ipos):
        """Merge IPO records keyed by a safe key derived from the company name."""
        if not ipos:
            return 0
        now = datetime.now().isoformat()
        saved = 0
        with self.store.lock:
            stored = self._ipos()
            for ipo in ipos:
                name = ipo.get("company_name")
                if not name:
                    continue
                key = self._key_for(name, stored)
                existing = stored.get(key)
                stored[key] = {**(existing or {}), **ipo, "key": key, "updated_at": now}
                saved += 1
        self.store.save(IPOS_KEY)
        logger.info(f"Saved {saved} IPOs")
        return saved

    def get_all_ipos(self, skip=0, limit=100, status=None):
        with self.store.lock:
            ipos = list(self._ipos().values())
        if status:
            ipos = [i for i in ipos if i.get("status") == status]
        ipos.sort(key=lambda i: i.get("opening_date") or "", reverse=True)
        return ipos[skip:skip + limit]

    def get_ipos_by_status(self, status):
        return self.get_all_ipos(limit=1000, status=status)

    def get_ipo_by_company_name(self, company_name):
        """Exact key, then exact company name, then partial key match."""
        key = generate_safe_key(company_name)
        with self.store.lock:
            stored = dict(self._ipos())
        if key in stored:
            return stored[key]
        target = company_name.strip().lower()
        for ipo in stored.values():
            if (ipo.get("company_name") or "").lower() == target:
                return ipo
        for stored_key, ipo in stored.items():
            if key and (key in stored_key or stored_key in key):
                return ipo
        return None

    def search_ipos(self, query, limit=50):
        q = query.lower()
        with self.store.lock:
            ipos = list(self._ipos().values())
        fields = ("company_name", "sector", "issue_manager")
        matches = [i for i in ipos if any(q in (i.get(f) or "").lower() for f in fields)]
        return matches[:limit]

    def get_active_ipos(self):
        with self.store.lock:
            ipos = list(self._ipos().values())
        return [i for i in ipos if i.get("status") in ("open", "upcoming")]

    def get_ipo_counts(self):
        with self.store.lock:
            ipos = list(self._ipos().values())
        counts = {status: 0 for status in IPO_STATUSES}
        for ipo in ipos:
            status = ipo.get("status")
            if status in counts:
                counts[status] += 1
        counts["total"] = len(ipos)
        return counts
