from __future__ import annotations

import unittest

from winbuilder.errors import ConflictingOptions
from winbuilder.options import BuildType, PlatformScope, build_request, split_architectures


class BuildRequestTests(unittest.TestCase):
    def test_defaults(self) -> None:
        request = build_request()
        self.assertIs(request.build_type, BuildType.DEBUG)
        self.assertIs(request.scope, PlatformScope.BOTH)
        self.assertEqual(request.architectures, ("anycpu",))
        self.assertFalse(request.dry_run)

    def test_release_and_scope_flags(self) -> None:
        request = build_request(release=True, phone=True)
        self.assertIs(request.build_type, BuildType.RELEASE)
        self.assertIs(request.scope, PlatformScope.PHONE)
        self.assertTrue(request.scope.includes_phone)
        self.assertFalse(request.scope.includes_store)

        store_request = build_request(debug=True, store=True)
        self.assertIs(store_request.build_type, BuildType.DEBUG)
        self.assertIs(store_request.scope, PlatformScope.STORE)

    def test_both_scope_includes_store_and_phone(self) -> None:
        self.assertTrue(PlatformScope.BOTH.includes_store)
        self.assertTrue(PlatformScope.BOTH.includes_phone)

    def test_conflicting_build_types(self) -> None:
        with self.assertRaises(ConflictingOptions) as ctx:
            build_request(debug=True, release=True)
        self.assertIn('"debug"/"release"', str(ctx.exception))

    def test_conflicting_scopes(self) -> None:
        with self.assertRaises(ConflictingOptions) as ctx:
            build_request(phone=True, store=True)
        self.assertIn('"phone"/"store"', str(ctx.exception))

    def test_archs_split_on_whitespace_without_validation(self) -> None:
        request = build_request(archs=["arm  x86\tbogus"])
        self.assertEqual(request.architectures, ("arm", "x86", "bogus"))

    def test_repeated_archs_are_concatenated_and_duplicates_kept(self) -> None:
        request = build_request(archs=["arm", "x86 arm"])
        self.assertEqual(request.architectures, ("arm", "x86", "arm"))

    def test_empty_archs_fall_back_to_defaults(self) -> None:
        self.assertEqual(build_request(archs=[""]).architectures, ("anycpu",))
        self.assertEqual(
            build_request(archs=[], default_architectures=["x64", "arm"]).architectures,
            ("x64", "arm"),
        )

    def test_explicit_archs_override_defaults(self) -> None:
        request = build_request(archs=["arm"], default_architectures=["x64"])
        self.assertEqual(request.architectures, ("arm",))

    def test_split_architectures_handles_none(self) -> None:
        self.assertEqual(split_architectures(None), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
