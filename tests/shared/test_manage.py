import pytest

import manage


def test_requires_a_command():
    with pytest.raises(SystemExit):
        manage.main([])


def test_rejects_unknown_domain():
    with pytest.raises(SystemExit):
        manage.main(["setup-db", "--domain", "payments"])


def test_setup_db_on_memory_providers_is_a_no_op(capsys):
    manage.main(["setup-db", "--domain", "identity"])

    output = capsys.readouterr().out
    assert "nothing to create" in output
    assert output.strip().endswith("Done.")


def test_seed_twice(capsys, reset_domain):
    from catalogue.domain import catalogue

    try:
        manage.main(["seed"])
        manage.main(["seed"])
    finally:
        reset_domain(catalogue)

    output = capsys.readouterr().out
    assert "Inserted 8 products." in output
    assert "Catalog already populated." in output
