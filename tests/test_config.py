import config
from config import ArticleGroup, group_map, validate_config


def test_default_config_is_valid():
    valid, errors = validate_config()
    assert valid is True
    assert errors == []


def test_group_map_is_keyed_by_id():
    groups = group_map()
    assert set(groups) == {group.id for group in config.ARTICLE_GROUPS}
    assert groups["web3"].name == "Web3 & Solidity"


def test_validate_config_reports_every_problem(monkeypatch):
    monkeypatch.setattr(config, "SITE_URL", "nivelais.com")
    monkeypatch.setattr(config, "RECENT_LIMIT", -1)
    monkeypatch.setattr(config, "WORDS_PER_MINUTE", 0)
    monkeypatch.setattr(
        config,
        "ARTICLE_GROUPS",
        [
            ArticleGroup(id="dup", name="A", description="", icon="box", icon_color="", order=1),
            ArticleGroup(id="dup", name="B", description="", icon="box", icon_color="", order=2),
        ],
    )
    valid, errors = validate_config()
    assert valid is False
    assert len(errors) == 4
    assert any("SITE_URL" in item for item in errors)
    assert any("duplicate article group id 'dup'" in item for item in errors)
