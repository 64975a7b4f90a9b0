import json
import pytest
from click.testing import CliRunner
from rocker_compose.CLI.main import cli
from rocker_compose.CONVERTERS.to_docker_api import config_labels
from rocker_compose.labels import LABEL_CONFIG
from rocker_compose.MODELS.container_config import ContainerConfig

COMPOSE = """
namespace: app
containers:
  web:
    image: nginx:${TAG:-latest}
    memory: 512m
    ports: ["8080:80", "8081:80"]
    links: [db]
  db:
    image: postgres:13
    volumes: ["/var/lib/postgresql/data", "/srv/pg:/backup:ro"]
"""

@pytest.fixture
def compose_file(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text(COMPOSE)
    return str(path)

def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'render' in result.output
    assert 'inspect' in result.output

def test_cli_render_no_file():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', 'non_existent.yml', 'render'])
    assert result.exit_code == 1
    assert 'non_existent.yml not found.' in result.output

def test_cli_render(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, 'render'], env={'TAG': '1.21'})
    assert result.exit_code == 0, result.output

    requests = json.loads(result.output)
    assert set(requests) == {'app.web', 'app.db'}
    web = requests['app.web']
    assert web['Image'] == 'nginx:1.21'
    assert web['Memory'] == 536870912
    assert web['HostConfig']['Memory'] == 536870912
    assert web['HostConfig']['Links'] == ['app.db:db']
    assert [b['HostPort'] for b in web['HostConfig']['PortBindings']['80/tcp']] == ['8080', '8081']
    assert LABEL_CONFIG in web['Labels']

    db = requests['app.db']
    assert db['Volumes'] == {'/var/lib/postgresql/data': {}}
    assert db['HostConfig']['Binds'] == ['/srv/pg:/backup:ro']

def test_cli_render_selected(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, 'render', 'db'])
    assert result.exit_code == 0, result.output
    assert set(json.loads(result.output)) == {'app.db'}

def test_cli_render_unknown_container(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, 'render', 'nope'])
    assert result.exit_code == 1
    assert 'nope' in result.output

def test_cli_render_env_file(compose_file, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TAG=1.25\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, '--env-file', str(env_file), 'render', 'web'])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)['app.web']['Image'] == 'nginx:1.25'

def test_cli_inspect(tmp_path):
    config = ContainerConfig(image='nginx:1.21', hostname='web')
    inspect_data = [
        {'Id': 'abc', 'Name': '/app.web', 'Config': {'Image': 'nginx:1.21', 'Labels': config_labels(config)}},
        {'Id': 'def', 'Name': '/unmanaged', 'Config': {'Image': 'redis', 'Labels': {}}},
    ]
    path = tmp_path / "inspect.json"
    path.write_text(json.dumps(inspect_data))

    runner = CliRunner()
    result = runner.invoke(cli, ['inspect', str(path)])
    assert result.exit_code == 0, result.output
    assert '# app.web' in result.output
    assert 'hostname: web' in result.output
    assert '# unmanaged' not in result.output

def test_cli_inspect_nothing_managed(tmp_path):
    path = tmp_path / "inspect.json"
    path.write_text(json.dumps({'Id': 'def', 'Name': '/unmanaged', 'Config': {'Labels': None}}))

    runner = CliRunner()
    result = runner.invoke(cli, ['inspect', str(path)])
    assert result.exit_code == 1
    assert 'No rocker-compose configuration found.' in result.output

def test_cli_inspect_skips_non_objects(tmp_path):
    config = ContainerConfig(image='nginx:1.21')
    inspect_data = [
        'not-an-object',
        42,
        {'Id': 'abc', 'Name': '/app.web', 'Config': {'Labels': config_labels(config)}},
    ]
    path = tmp_path / "inspect.json"
    path.write_text(json.dumps(inspect_data))

    runner = CliRunner()
    result = runner.invoke(cli, ['inspect', str(path)])
    assert result.exit_code == 0, result.output
    assert '# app.web' in result.output
