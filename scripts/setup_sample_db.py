"""Utility that launches a sample Neo4j Docker container for cypherpad."""

from __future__ import annotations

import argparse
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cypherpad.config import (
    CONFIG_FILE,
    AppConfig,
    AuthTokenConfig,
    DatabaseProfileConfig,
    load_config,
    save_config,
)

DEFAULT_CONTAINER = "cypherpad-sample-db"
DEFAULT_BOLT_PORT = 7697
DEFAULT_HTTP_PORT = 7484
DEFAULT_USER = "neo4j"
DEFAULT_PASSWORD = "cypherpad"
DOCKER_IMAGE = "neo4j:5"
PROFILE_NAME = "Docker Sample"

SAMPLE_QUERIES = """// Sections are separated by lines starting with ####
MATCH (p:Person)-[:ACTED_IN]->(m:Movie)
RETURN p.name AS actor, m.title AS movie
ORDER BY actor
#### Largest integer the server can store
RETURN 9223372036854775807 AS big
#### Paths
MATCH path = (:Person {name: 'Keanu Reeves'})-[:ACTED_IN]->(:Movie)
RETURN path
"""


def run(cmd: list[str], *, check: bool = True, **kwargs) -> subprocess.CompletedProcess[str]:
    print("$", " ".join(cmd))
    return subprocess.run(cmd, check=check, text=True, **kwargs)


def container_exists(name: str) -> bool:
    result = subprocess.run(
        ["docker", "ps", "-a", "--filter", f"name={name}", "--format", "{{.ID}}"],
        text=True,
        capture_output=True,
    )
    return bool(result.stdout.strip())


def start_container(name: str, bolt_port: int, http_port: int, password: str) -> None:
    if container_exists(name):
        print(f"Container '{name}' already exists. Reusing it.")
        run(["docker", "start", name], check=False)
    else:
        run(
            [
                "docker",
                "run",
                "-d",
                "--name",
                name,
                "-e",
                f"NEO4J_AUTH={DEFAULT_USER}/{password}",
                "-p",
                f"{bolt_port}:7687",
                "-p",
                f"{http_port}:7474",
                DOCKER_IMAGE,
            ]
        )
    wait_for_start(name, password)


def wait_for_start(name: str, password: str, retries: int = 30, delay: float = 2.0) -> None:
    for _ in range(retries):
        result = subprocess.run(
            ["docker", "exec", name, "cypher-shell", "-u", DEFAULT_USER, "-p", password, "RETURN 1"],
            text=True,
            capture_output=True,
        )
        if result.returncode == 0:
            return
        time.sleep(delay)
    print("Warning: database did not report ready state; continuing anyway.")


def seed_data(name: str, password: str) -> None:
    cypher = """
    MERGE (keanu:Person {name: 'Keanu Reeves', born: 1964})
    MERGE (carrie:Person {name: 'Carrie-Anne Moss', born: 1967})
    MERGE (matrix:Movie {title: 'The Matrix', released: 1999})
    MERGE (wick:Movie {title: 'John Wick', released: 2014})
    MERGE (keanu)-[:ACTED_IN {roles: ['Neo']}]->(matrix)
    MERGE (carrie)-[:ACTED_IN {roles: ['Trinity']}]->(matrix)
    MERGE (keanu)-[:ACTED_IN {roles: ['John Wick']}]->(wick);
    """.strip()

    run(
        ["docker", "exec", "-i", name, "cypher-shell", "-u", DEFAULT_USER, "-p", password],
        input=cypher,
    )


def write_sample_queries(path: Path) -> None:
    if path.exists():
        print(f"{path} already exists; leaving as-is.")
        return
    path.write_text(SAMPLE_QUERIES)
    print(f"Wrote sample queries to {path}.")


def update_config(bolt_port: int, password: str) -> None:
    try:
        config = load_config()
    except Exception:
        config = AppConfig()
    databases = list(config.databases)
    target = next((p for p in databases if p.name == PROFILE_NAME), None)
    if target is None:
        databases.append(
            DatabaseProfileConfig(
                name=PROFILE_NAME,
                url=f"neo4j://localhost:{bolt_port}",
                database="neo4j",
                auth=AuthTokenConfig(principal=DEFAULT_USER, credentials=password),
            )
        )
        config = config.model_copy(update={"databases": databases})
        save_config(config)
        print(f"Added '{PROFILE_NAME}' profile to {CONFIG_FILE}.")
    else:
        print(f"Profile '{PROFILE_NAME}' already present in config; leaving as-is.")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--container", default=DEFAULT_CONTAINER, help="Docker container name")
    parser.add_argument("--bolt-port", type=int, default=DEFAULT_BOLT_PORT, help="Host port to expose Bolt on")
    parser.add_argument("--http-port", type=int, default=DEFAULT_HTTP_PORT, help="Host port to expose the browser on")
    parser.add_argument("--password", default=DEFAULT_PASSWORD, help="Password for the neo4j user")
    parser.add_argument("--queries", type=Path, default=Path("sample.cypher"), help="Sample query file to create")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        start_container(args.container, args.bolt_port, args.http_port, args.password)
        seed_data(args.container, args.password)
    except FileNotFoundError:
        print("Docker is not installed or not on PATH.")
        return 1
    update_config(args.bolt_port, args.password)
    write_sample_queries(args.queries)
    print(
        f"Sample database is ready. Run `cypherpad {args.queries}` and pick the "
        f"'{PROFILE_NAME}' profile (neo4j://localhost:{args.bolt_port})."
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
