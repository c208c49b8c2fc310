"""
Security handles (bizorm/models/security.py)
"""

from bizorm.models import AccessControlList, Permission, RecordRule, RecordRuleRegistry


class TestAccessControlList:

    def test_add_and_remove(self):
        acl = AccessControlList()
        acl.add_permission("sales", Permission.READ)
        acl.add_permission("sales", Permission.WRITE)
        assert acl.permissions("sales") == Permission.READ | Permission.WRITE

        acl.remove_permission("sales", Permission.READ)
        assert acl.permissions("sales") == Permission.WRITE
        acl.remove_permission("sales", Permission.WRITE)
        assert acl.groups() == []

    def test_unknown_group(self):
        assert AccessControlList().permissions("nobody") == Permission.NONE

    def test_all(self):
        acl = AccessControlList()
        acl.add_permission("admin", Permission.ALL)
        assert Permission.UNLINK in acl.permissions("admin")


class TestRecordRules:

    def test_registry(self, partner):
        rule = RecordRule("own_partners", condition=partner.field("Manager").equals(1), group="sales")
        partner.rules_registry.add_rule(rule)
        assert partner.rules_registry.get("own_partners") is rule
        assert partner.rules_registry.all() == [rule]
        partner.rules_registry.remove_rule("own_partners")
        assert partner.rules_registry.get("own_partners") is None

    def test_defaults(self):
        rule = RecordRule("r")
        assert rule.perms == Permission.ALL
        assert not rule.global_rule
        assert RecordRuleRegistry().all() == []
