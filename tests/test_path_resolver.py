import os

from cloudsaver.core.path_resolver import expand_path, is_drive_rooted, resolve_home


def test_expand_home_prefix():
    assert expand_path("~/foo/bar", home="/home/me") == os.path.normpath("/home/me/foo/bar")
    assert expand_path("~", home="/home/me") == os.path.normpath("/home/me")


def test_other_paths_only_normalised():
    assert expand_path("/abs/./path/", home="/home/me") == os.path.normpath("/abs/path")
    assert expand_path("E:/Emulation/saves", home="/home/me") == os.path.normpath("E:/Emulation/saves")
    assert expand_path("not~/tilde", home="/home/me") == os.path.normpath("not~/tilde")


def test_expand_is_idempotent():
    once = expand_path("~/Emulation/saves", home="/home/me")
    assert expand_path(once, home="/home/me") == once


def test_missing_home_expands_to_relative():
    assert expand_path("~/foo", home="") == "foo"
    assert expand_path("~", home="") == ""


def test_resolve_home_order():
    assert resolve_home({"HOME": "/home/me", "USERPROFILE": "C:\\Users\\me"}) == "/home/me"
    assert resolve_home({"USERPROFILE": "C:\\Users\\me"}) == "C:\\Users\\me"
    assert resolve_home({}) == ""


def test_is_drive_rooted():
    assert is_drive_rooted("E:\\Emulation")
    assert is_drive_rooted("c:/games")
    assert not is_drive_rooted("/home/me")
    assert not is_drive_rooted("E:")

