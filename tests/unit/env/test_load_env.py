import pytest

from cachelab.env import Env, load_env


@pytest.fixture(autouse=True)
def clear_cachelab_environment(monkeypatch):
    for envar_name in Env.types_map():
        monkeypatch.delenv(envar_name, raising=False)


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text(
        "\n".join(
            [
                "CACHELAB_LATENCY_WINDOW=10s",
                "CACHELAB_CACHE_ENABLED=true",
                "CACHELAB_LOAD_FREQUENCY=20",
                "UNRELATED_SETTING=ignored",
            ]
        )
    )

    return str(path)


class TestLoadEnv:
    def test_defaults(self, tmp_path) -> None:
        env = load_env(Env, env_file=str(tmp_path / "missing.env"))

        assert env == Env()
        assert env.CACHELAB_LATENCY_WINDOW == "5s"
        assert env.CACHELAB_CACHE_ENABLED is False

    def test_reads_environment_variables(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("CACHELAB_LOAD_FREQUENCY", "10")
        monkeypatch.setenv("CACHELAB_STORE_DELAY_MIN", "50ms")

        env = load_env(Env, env_file=str(tmp_path / "missing.env"))

        assert env.CACHELAB_LOAD_FREQUENCY == 10
        assert env.CACHELAB_STORE_DELAY_MIN == "50ms"

    def test_env_file_overrides_environment(self, monkeypatch, env_file) -> None:
        monkeypatch.setenv("CACHELAB_LOAD_FREQUENCY", "10")

        env = load_env(Env, env_file=env_file)

        assert env.CACHELAB_LOAD_FREQUENCY == 20
        assert env.CACHELAB_LATENCY_WINDOW == "10s"
        assert env.CACHELAB_CACHE_ENABLED is True

    def test_explicit_override_wins(self, env_file) -> None:
        env = load_env(
            Env,
            env_file=env_file,
            override=Env(CACHELAB_LOAD_FREQUENCY=50),
        )

        assert env.CACHELAB_LOAD_FREQUENCY == 50
        assert env.CACHELAB_LATENCY_WINDOW == "10s"

    def test_invalid_value_fails_fast(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("CACHELAB_LOG_OUTPUT", "syslog")

        with pytest.raises(ValueError):
            load_env(Env, env_file=str(tmp_path / "missing.env"))

    def test_reads_cache_mode(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("CACHELAB_CACHE_MODE", "capacity")
        monkeypatch.setenv("CACHELAB_CACHE_MAX_BYTES", "4096")

        env = load_env(Env, env_file=str(tmp_path / "missing.env"))

        assert env.CACHELAB_CACHE_MODE == "capacity"
        assert env.CACHELAB_CACHE_MAX_BYTES == 4096

    def test_unknown_cache_mode_fails_fast(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("CACHELAB_CACHE_MODE", "storage")

        with pytest.raises(ValueError):
            load_env(Env, env_file=str(tmp_path / "missing.env"))
