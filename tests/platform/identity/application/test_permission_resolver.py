"""Tests for permission resolution and the cached resolver."""

import pytest
import pytest_asyncio

from neo_identity.platform.identity.application.services import (
    CachedPermissionResolver,
    resolve_effective_permissions,
)
from neo_identity.platform.identity.core.entities import Permission, Role, User
from neo_identity.platform.identity.core.events import PermissionChanged, PermissionChangeType, UserLoggedIn
from neo_identity.platform.identity.infrastructure.cache import MemoryPermissionCache


@pytest.fixture
def catalog(now):
    """Permissions and roles for org ``acme`` plus a foreign custom permission."""
    read = Permission.create("users.read", "users", "read", now=now)
    write = Permission.create("users.write", "users", "write", now=now)
    export = Permission.create("reports.export", "reports", "export", org_id="acme", now=now)
    foreign = Permission.create("globex.secret", "secret", "view", org_id="globex", now=now)

    viewer = Role.create("Viewer", "acme", permission_ids=[read.id, export.id], now=now)
    editor = Role.create("Editor", "acme", permission_ids=[write.id], is_active=False, now=now)
    # Stale reference to another org's custom permission
    tampered = Role.create("Tampered", "acme", permission_ids=[foreign.id], now=now)
    return {
        "permissions": [read, write, export, foreign],
        "roles": [viewer, editor, tampered],
        "viewer": viewer,
        "editor": editor,
        "tampered": tampered,
    }


@pytest.fixture
def member(catalog, now):
    return User.register(
        "member@acme.io",
        "member",
        "Member",
        "acme",
        role_ids=[role.id for role in catalog["roles"]],
        now=now,
    )


@pytest_asyncio.fixture
async def seeded(catalog, member, role_repository, permission_repository, user_repository):
    for permission in catalog["permissions"]:
        await permission_repository.save(permission)
    for role in catalog["roles"]:
        await role_repository.save(role)
    await user_repository.save(member)
    return catalog


class TestResolveEffectivePermissions:
    def test_union_of_active_roles(self, catalog, member):
        resolved = resolve_effective_permissions(member, catalog["roles"], catalog["permissions"])

        assert resolved.names == frozenset({"users.read", "reports.export"})
        assert resolved.can_perform("users", "read")

    def test_inactive_role_contributes_nothing(self, catalog, member):
        resolved = resolve_effective_permissions(member, catalog["roles"], catalog["permissions"])

        assert "users.write" not in resolved

    def test_foreign_custom_permission_is_ignored(self, catalog, member):
        resolved = resolve_effective_permissions(member, catalog["roles"], catalog["permissions"])

        assert not resolved.has("globex.secret")

    def test_roles_of_other_orgs_are_ignored(self, catalog, now):
        outsider = User.register("x@globex.io", "x", "X", "globex", role_ids=[catalog["viewer"].id], now=now)

        resolved = resolve_effective_permissions(outsider, catalog["roles"], catalog["permissions"])

        assert len(resolved) == 0

    def test_unassigned_roles_are_ignored(self, catalog, now):
        user = User.register("y@acme.io", "y", "Y", "acme", now=now)

        assert len(resolve_effective_permissions(user, catalog["roles"], catalog["permissions"])) == 0

    def test_deterministic(self, catalog, member):
        first = resolve_effective_permissions(member, catalog["roles"], catalog["permissions"])
        second = resolve_effective_permissions(
            member, list(reversed(catalog["roles"])), list(reversed(catalog["permissions"]))
        )

        assert first == second


class TestPermissionResolver:
    @pytest.mark.asyncio
    async def test_resolve_through_repositories(self, permission_resolver, seeded, member):
        resolved = await permission_resolver.resolve(member)

        assert resolved.names == frozenset({"users.read", "reports.export"})

    @pytest.mark.asyncio
    async def test_predicates(self, permission_resolver, seeded, member):
        assert await permission_resolver.has_permission(member, "users.read")
        assert not await permission_resolver.has_permission(member, "users.write")
        assert await permission_resolver.has_any_permission(member, ["users.write", "reports.export"])
        assert not await permission_resolver.has_all_permissions(member, ["users.read", "users.write"])
        assert await permission_resolver.has_module_access(member, "reports")
        assert await permission_resolver.can_perform(member, "users", "read")

    @pytest.mark.asyncio
    async def test_deactivating_role_removes_its_permissions(
        self, permission_resolver, seeded, member, role_repository, now
    ):
        viewer = seeded["viewer"]
        viewer.deactivate(now)
        await role_repository.save(viewer)

        resolved = await permission_resolver.resolve(member)

        assert not resolved.has("users.read")
        assert not resolved.has("reports.export")

    @pytest.mark.asyncio
    async def test_user_without_roles(self, permission_resolver, now):
        user = User.register("z@acme.io", "z", "Z", "acme", now=now)

        assert len(await permission_resolver.resolve(user)) == 0


class TestCachedPermissionResolver:
    @pytest.fixture
    def cache(self):
        return MemoryPermissionCache()

    @pytest.fixture
    def cached_resolver(self, permission_resolver, cache):
        return CachedPermissionResolver(permission_resolver, cache)

    @pytest.mark.asyncio
    async def test_caches_resolved_set(self, cached_resolver, cache, seeded, member):
        first = await cached_resolver.resolve(member)

        assert await cache.get("acme", member.id) == first
        assert await cached_resolver.has_permission(member, "users.read")

    @pytest.mark.asyncio
    async def test_role_update_invalidates_org(self, cached_resolver, cache, seeded, member, role_repository, now):
        await cached_resolver.resolve(member)
        viewer = seeded["viewer"]
        event = viewer.deactivate(now)
        await role_repository.save(viewer)

        removed = await cached_resolver.handle_event(event)

        assert removed == 1
        assert not await cached_resolver.has_permission(member, "users.read")

    @pytest.mark.asyncio
    async def test_system_permission_change_invalidates_everything(self, cached_resolver, cache, seeded, member, now):
        await cached_resolver.resolve(member)
        await cache.set("globex", "someone", await cached_resolver.resolve(member))
        event = PermissionChanged(
            occurred_on=now,
            permission_id="p1",
            org_id="",
            permission_name="users.read",
            module="users",
            action="read",
            change_type=PermissionChangeType.UPDATED,
            changed_by="admin-1",
        )

        assert await cached_resolver.handle_event(event) == 2
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_unrelated_events_are_ignored(self, cached_resolver, cache, seeded, member, now):
        await cached_resolver.resolve(member)
        event = UserLoggedIn(occurred_on=now, user_id=member.id, org_id="acme", email="m@acme.io", username="m")

        assert await cached_resolver.handle_event(event) == 0
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_invalidate_user(self, cached_resolver, cache, seeded, member):
        await cached_resolver.resolve(member)

        await cached_resolver.invalidate_user(member)

        assert await cache.get("acme", member.id) is None
