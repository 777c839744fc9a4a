"""SQL-backed page and block stores over ``wren.data.Database``.

Tables::

    wren_site   id, name
    wren_page   id, site_id, parent_id, url, route_name, name, decorate, enabled
    wren_block  id, page_id, parent_id, type, settings (JSON), enabled, position

A page loads as an aggregate: the page, its ancestor chain (followed
through ``parent_id``, nearest first), and the top-level blocks of every
page in the chain.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from wren.data import Database, QueryError
from wren.models import CONTAINER_TYPE, Block, Page, Site

logger = logging.getLogger("wren.store")

SCHEMA = """
CREATE TABLE IF NOT EXISTS wren_site (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT    NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS wren_page (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    site_id    INTEGER REFERENCES wren_site(id),
    parent_id  INTEGER REFERENCES wren_page(id),
    url        TEXT,
    route_name TEXT,
    name       TEXT,
    decorate   INTEGER NOT NULL DEFAULT 1,
    enabled    INTEGER NOT NULL DEFAULT 1
);

CREATE UNIQUE INDEX IF NOT EXISTS wren_page_site_url ON wren_page(site_id, url);
CREATE UNIQUE INDEX IF NOT EXISTS wren_page_site_route ON wren_page(site_id, route_name);

CREATE TABLE IF NOT EXISTS wren_block (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    page_id   INTEGER NOT NULL REFERENCES wren_page(id),
    parent_id INTEGER REFERENCES wren_block(id),
    type      TEXT    NOT NULL DEFAULT '',
    settings  TEXT    NOT NULL DEFAULT '{}',
    enabled   INTEGER NOT NULL DEFAULT 1,
    position  INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS wren_block_page ON wren_block(page_id);
"""

# Criterion name -> column. Anything else is rejected before reaching SQL.
_CRITERIA_COLUMNS = {
    "id": "id",
    "url": "url",
    "route_name": "route_name",
    "name": "name",
    "site": "site_id",
}

_PAGE_COLUMNS = "id, site_id, parent_id, url, route_name, name, decorate, enabled"
_BLOCK_COLUMNS = "id, page_id, parent_id, type, settings, enabled, position"


@dataclass(frozen=True, slots=True)
class _SiteRow:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class _PageRow:
    id: int
    site_id: int | None
    parent_id: int | None
    url: str | None
    route_name: str | None
    name: str | None
    decorate: bool
    enabled: bool


@dataclass(frozen=True, slots=True)
class _BlockRow:
    id: int
    page_id: int
    parent_id: int | None
    type: str
    settings: str
    enabled: bool
    position: int


async def create_schema(db: Database) -> None:
    """Create the wren tables and indexes if they do not exist."""
    await db.execute_script(SCHEMA)


async def _load_blocks(db: Database, page: Page) -> list[Block]:
    """Fetch every block of *page*, link parents, refresh ``page.blocks``.

    Returns all blocks (nested ones included) in position order;
    ``page.blocks`` keeps only the top-level ones.
    """
    rows = await db.fetch(
        _BlockRow,
        f"SELECT {_BLOCK_COLUMNS} FROM wren_block WHERE page_id = ? ORDER BY position, id",
        page.id,
    )
    by_id = {row.id: _block_from_row(row, page) for row in rows}
    for row in rows:
        if row.parent_id is not None:
            by_id[row.id].parent = by_id.get(row.parent_id)

    blocks = list(by_id.values())
    page.blocks = [block for block in blocks if block.parent is None]
    return blocks


def _block_from_row(row: _BlockRow, page: Page | None) -> Block:
    return Block(
        id=row.id,
        page=page,
        settings=json.loads(row.settings),
        enabled=row.enabled,
        position=row.position,
        type=row.type,
    )


class SQLPageStore:
    """Pages stored in ``wren_page``.

    Usage::

        db = Database("sqlite:///cms.db")
        await create_schema(db)
        pages = SQLPageStore(db)

        site = await pages.save_site(Site(name="main"))
        page = pages.create(url="/", route_name="home", name="Home")
        page.site = site
        await pages.save(page)
    """

    __slots__ = ("_db", "_sites")

    def __init__(self, db: Database) -> None:
        self._db = db
        self._sites: dict[int, Site] = {}

    async def save_site(self, site: Site) -> Site:
        """Persist *site*, assigning an id when it has none."""
        if site.id is None:
            site.id = await self._db.insert("INSERT INTO wren_site (name) VALUES (?)", site.name)
        else:
            await self._db.execute("UPDATE wren_site SET name = ? WHERE id = ?", site.name, site.id)
        self._sites[site.id] = site
        return site

    async def find_one(self, criteria: Mapping[str, Any]) -> Page | None:
        clauses: list[str] = []
        params: list[Any] = []
        for key, value in criteria.items():
            column = _CRITERIA_COLUMNS.get(key)
            if column is None:
                msg = f"Unknown page criterion: {key!r}"
                raise QueryError(msg)
            clauses.append(f"{column} IS ?")
            params.append(value)

        where = " AND ".join(clauses) or "1 = 1"
        row = await self._db.fetch_one(
            _PageRow,
            f"SELECT {_PAGE_COLUMNS} FROM wren_page WHERE {where} ORDER BY id LIMIT 1",
            *params,
        )
        if row is None:
            return None
        return await self._assemble(row)

    def create(self, **attributes: Any) -> Page:
        return Page(**attributes)

    async def save(self, page: Page) -> None:
        site_id = page.site.id if page.site is not None else None
        parent_id = page.parent.id if page.parent is not None else None
        values = (
            site_id,
            parent_id,
            page.url,
            page.route_name,
            page.name,
            page.decorate,
            page.enabled,
        )
        if page.id is None:
            page.id = await self._db.insert(
                "INSERT INTO wren_page"
                " (site_id, parent_id, url, route_name, name, decorate, enabled)"
                " VALUES (?, ?, ?, ?, ?, ?, ?)",
                *values,
            )
        else:
            await self._db.execute(
                "UPDATE wren_page SET site_id = ?, parent_id = ?, url = ?, route_name = ?,"
                " name = ?, decorate = ?, enabled = ? WHERE id = ?",
                *values,
                page.id,
            )

    async def _site(self, site_id: int | None) -> Site | None:
        if site_id is None:
            return None
        site = self._sites.get(site_id)
        if site is None:
            row = await self._db.fetch_one(
                _SiteRow, "SELECT id, name FROM wren_site WHERE id = ?", site_id
            )
            if row is None:
                return None
            site = self._sites[site_id] = Site(id=row.id, name=row.name)
        return site

    async def _page(self, row: _PageRow) -> Page:
        return Page(
            id=row.id,
            url=row.url,
            route_name=row.route_name,
            name=row.name,
            site=await self._site(row.site_id),
            decorate=row.decorate,
            enabled=row.enabled,
        )

    async def _assemble(self, row: _PageRow) -> Page:
        """Build the page aggregate: ancestors nearest first, blocks attached."""
        page = await self._page(row)
        seen = {row.id}
        parent_id = row.parent_id
        while parent_id is not None and parent_id not in seen:
            seen.add(parent_id)
            parent_row = await self._db.fetch_one(
                _PageRow, f"SELECT {_PAGE_COLUMNS} FROM wren_page WHERE id = ?", parent_id
            )
            if parent_row is None:
                break
            page.parents.append(await self._page(parent_row))
            parent_id = parent_row.parent_id

        if parent_id is not None and parent_id in seen:
            logger.warning("Ancestor cycle at page %r while loading page %r", parent_id, row.id)

        # Each ancestor gets the rest of the chain as its own ancestors.
        for index, parent in enumerate(page.parents):
            parent.parents = page.parents[index + 1 :]

        for member in (page, *page.parents):
            await _load_blocks(self._db, member)
        return page


class SQLBlockStore:
    """Blocks stored in ``wren_block``.

    ``load_page_blocks`` refreshes ``page.blocks`` with the objects it
    returns, so a resolver's block cache and the page agree on identity.
    ``get_block`` returns a block whose page is the full aggregate.
    """

    __slots__ = ("_db", "_pages", "container_setting")

    def __init__(self, db: Database, *, container_setting: str = "name") -> None:
        self._db = db
        self._pages = SQLPageStore(db)
        self.container_setting = container_setting

    async def load_page_blocks(self, page: Page) -> Sequence[Block]:
        return await _load_blocks(self._db, page)

    async def get_block(self, block_id: int) -> Block | None:
        row = await self._db.fetch_one(
            _BlockRow, f"SELECT {_BLOCK_COLUMNS} FROM wren_block WHERE id = ?", block_id
        )
        if row is None:
            return None
        page = await self._pages.find_one({"id": row.page_id})
        if page is None:
            return _block_from_row(row, None)
        blocks = await _load_blocks(self._db, page)
        return next((block for block in blocks if block.id == row.id), None)

    async def save(self, block: Block) -> Block:
        """Persist *block*, assigning an id when it has none.

        A new top-level block is appended to its page's blocks.
        """
        if block.page is None or block.page.id is None:
            msg = "Blocks can only be saved on a saved page"
            raise QueryError(msg)
        parent_id = block.parent.id if block.parent is not None else None
        values = (
            block.page.id,
            parent_id,
            block.type,
            json.dumps(block.settings),
            block.enabled,
            block.position,
        )
        if block.id is None:
            block.id = await self._db.insert(
                "INSERT INTO wren_block (page_id, parent_id, type, settings, enabled, position)"
                " VALUES (?, ?, ?, ?, ?, ?)",
                *values,
            )
            if block.parent is None:
                block.page.blocks.append(block)
        else:
            await self._db.execute(
                "UPDATE wren_block SET page_id = ?, parent_id = ?, type = ?, settings = ?,"
                " enabled = ?, position = ? WHERE id = ?",
                *values,
                block.id,
            )
        return block

    async def create_new_container(
        self,
        *,
        enabled: bool,
        page: Page,
        name: str,
        position: int,
        parent: Block | None,
    ) -> Block:
        block = Block(
            page=page,
            parent=parent,
            settings={self.container_setting: name},
            enabled=enabled,
            position=position,
            type=CONTAINER_TYPE,
        )
        return await self.save(block)
