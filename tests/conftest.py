import sys

import pytest

from dockmon_cli.core.containers import ContainerManager

# Stands in for the docker CLI. Containers: aaa111 -> web (nginx:latest),
# bbb222 -> api (api:latest). "short-*" logs end after a few lines,
# "badutf" emits one undecodable line, "quiet-*" floods stdout and never
# writes stderr, anything else logs forever. Stack "flaky" lists gone999,
# which has a name but fails a full inspect.
FAKE_DOCKER = r"""#!/bin/sh
cmd="$1"
shift
case "$cmd" in
  ps)
    if [ "$2" = "--filter" ]; then
      case "$3" in
        *=shop) printf 'aaa111\nbbb222\nzzz999\n' ;;
        *=flaky) printf 'aaa111\ngone999\n' ;;
      esac
    else
      printf 'aaa111\nbbb222\n'
    fi
    ;;
  inspect)
    fmt="$2"
    target="$3"
    case "$fmt" in
      '{{.Name}}')
        case "$target" in
          aaa111) echo /web ;;
          bbb222) echo /api ;;
          gone999) echo /gone ;;
          *) echo "Error: No such object: $target" >&2; exit 1 ;;
        esac
        ;;
      '{{.Config.Image}}')
        case "$target" in
          web) echo nginx:latest ;;
          api) echo api:latest ;;
          *) echo "Error: No such object: $target" >&2; exit 1 ;;
        esac
        ;;
      *)
        case "$target" in
          aaa111|web) n=web ;;
          bbb222|api) n=api ;;
          *) echo "Error: No such object: $target" >&2; exit 1 ;;
        esac
        echo "/$n,running,always,healthy,2024-01-01T00:00:00.123456789Z,80/tcp "
        ;;
    esac
    ;;
  pull)
    echo "latest: Pulling from library/$1"
    case "$1" in
      nginx*) echo "Status: Downloaded newer image for $1" ;;
      *) echo "Status: Image is up to date for $1" ;;
    esac
    ;;
  rm)
    echo "rm $*" >> "${FAKE_DOCKER_LOG:-/dev/null}"
    ;;
  stats)
    printf 'web 1.50%% 10.00%%\napi 0.20%% 3.10%%\n'
    ;;
  logs)
    name="$1"
    case "$name" in
      short-*)
        echo "$name line 0"
        echo "$name line 1"
        echo "$name line 2"
        echo "$name warning" >&2
        ;;
      badutf)
        printf 'first\n\377\376 broken\nlast\n'
        ;;
      quiet-*)
        i=0
        while true; do
          echo "$name out $i"
          i=$((i+1))
        done
        ;;
      *)
        i=0
        while true; do
          echo "$name out $i"
          echo "$name err $i" >&2
          i=$((i+1))
          sleep 0.02
        done
        ;;
    esac
    ;;
  *)
    echo "unknown command: $cmd" >&2
    exit 1
    ;;
esac
"""


@pytest.fixture
def fake_docker(tmp_path):
    """Path to an executable fake docker CLI."""
    if sys.platform == "win32":
        pytest.skip("fake docker runtime needs a POSIX shell")
    script = tmp_path / "docker"
    script.write_text(FAKE_DOCKER)
    script.chmod(0o755)
    return str(script)


@pytest.fixture
def manager(fake_docker):
    """Container manager bound to the fake runtime."""
    return ContainerManager(runtime=fake_docker, use_color=False, wait_timeout=5)


@pytest.fixture
def missing_runtime(tmp_path):
    """Path to a runtime executable that does not exist."""
    return str(tmp_path / "no-such-docker")
