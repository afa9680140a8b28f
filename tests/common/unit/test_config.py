from onetab_archive.config import DEFAULT_CFG, extension_id_for, merge_cfg
from onetab_archive.renderer.buckets import GROUP_BY_CHOICES


def test_merge_cfg_applies_file_then_override():
    merged = merge_cfg({"outputDir": "./md", "domainsLimit": 10}, {"domainsLimit": 5, "masterJson": None})

    assert merged["outputDir"] == "./md"
    assert merged["domainsLimit"] == 5
    assert merged["masterJson"] == DEFAULT_CFG["masterJson"]


def test_merge_cfg_does_not_mutate_defaults():
    merge_cfg({"defaultBrowser": "chrome"}, None)
    assert DEFAULT_CFG["defaultBrowser"] == "edge"


def test_extension_ids():
    cfg = merge_cfg(None, None)
    assert extension_id_for(cfg, "edge") == "hoimpamkkoehapgenciaoajfkfkpgfop"
    assert extension_id_for(cfg, "chrome") == "chphlpgkkbolifaimnlloiipkdnihall"
    assert extension_id_for(cfg, "firefox") == ""


def test_default_candidate_keys():
    assert DEFAULT_CFG["storeCandidateKeys"][:2] == ["state", "_state"]
    assert DEFAULT_CFG["defaultGroupBy"] in GROUP_BY_CHOICES
