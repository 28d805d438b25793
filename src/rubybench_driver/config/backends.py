from dataclasses import dataclass

__all__ = ["Backend", "DEFAULT_BACKENDS"]


@dataclass(frozen=True)
class Backend:
    """A database engine that data-layer benchmarks are run against.

    Attributes:
        name: Short identifier, also used as key for the backend version.
        url: Connection string handed to the benchmark as DATABASE_URL.
        version_env: Environment variable holding the engine version.
    """

    name: str
    url: str
    version_env: str

    def connection_url(self, prepared_statements: bool) -> str:
        flag = "true" if prepared_statements else "false"
        return f"{self.url}?prepared_statements={flag}"


DEFAULT_BACKENDS: tuple[Backend, ...] = (
    Backend(
        name="psql",
        url="postgres://postgres@postgres:5432/rubybench",
        version_env="POSTGRES_ENV_PG_VERSION",
    ),
    Backend(
        name="mysql",
        url="mysql2://root@mysql:3306/rubybench",
        version_env="MYSQL_ENV_MYSQL_VERSION",
    ),
)
