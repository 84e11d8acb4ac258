import yaml
from quay.CONVERTERS.to_compose_yaml import ComposeYamlConverter
from quay.MANAGERS.port_override_applier import apply_port_overrides
from quay.MODELS.selection import PortOverride
from quay.PARSERS.compose_parser import ComposeParser


def test_convert_long_syntax_ports():
    topology = ComposeParser(context={}).parse_from_string("""
services:
  web:
    image: nginx
    ports: ["8080:80"]
networks:
  front: {}
""")
    document = yaml.safe_load(ComposeYamlConverter(topology).convert())
    assert document == {
        'services': {
            'web': {
                'image': 'nginx',
                'ports': [{'target': 80, 'published': '8080', 'protocol': 'tcp'}],
            },
        },
        'networks': {'front': {}},
    }


def test_convert_escapes_dollars():
    """A literal $ must survive docker-compose's own interpolation."""
    topology = ComposeParser(context={'PASSWORD': 'pa$word'}).parse_from_string(
        "services:\n  db:\n    environment:\n      PASSWORD: ${PASSWORD}\n      HOME_REF: $$HOME\n"
    )
    document = yaml.safe_load(ComposeYamlConverter(topology).convert())
    assert document['services']['db']['environment'] == {
        'PASSWORD': 'pa$$word',
        'HOME_REF': '$$HOME',
    }


def test_convert_keeps_unmodelled_fields():
    topology = ComposeParser(context={}).parse_from_string("""
x-logging: &logging
  driver: json-file
services:
  worker:
    build:
      context: ./worker
    depends_on: [queue]
    logging: *logging
  queue:
    image: rabbitmq
""")
    document = yaml.safe_load(ComposeYamlConverter(topology).convert())
    assert document['x-logging'] == {'driver': 'json-file'}
    assert document['services']['worker'] == {
        'build': {'context': './worker'},
        'depends_on': ['queue'],
        'logging': {'driver': 'json-file'},
    }
    assert document['services']['queue'] == {'image': 'rabbitmq'}


def test_convert_nested_default():
    """A nested default resolves on load instead of being written out escaped."""
    topology = ComposeParser(context={'FALLBACK_TAG': '1.25'}).parse_from_string(
        "services:\n  web:\n    image: nginx:${TAG:-${FALLBACK_TAG}}\n"
    )
    output = ComposeYamlConverter(topology).convert()
    assert yaml.safe_load(output)['services']['web']['image'] == 'nginx:1.25'
    assert '$' not in output


def test_convert_keeps_source_key_order():
    topology = ComposeParser(context={}).parse_from_string("""
name: shop
services:
  web:
    image: nginx
    ports:
      - published: "8080"
        target: 80
    restart: always
  db:
    image: postgres
networks:
  front: {}
""")
    topology, _ = apply_port_overrides(topology, [
        PortOverride(service_name='db', host_port='5433', container_port=5432),
    ])
    document = yaml.safe_load(ComposeYamlConverter(topology).convert())
    assert list(document) == ['name', 'services', 'networks']
    assert list(document['services']) == ['web', 'db']
    assert list(document['services']['web']) == ['image', 'ports', 'restart']
    assert list(document['services']['web']['ports'][0]) == ['published', 'target']
    # keys added by an override go last
    assert list(document['services']['db']) == ['image', 'ports']
    assert list(document['services']['db']['ports'][0]) == ['target', 'published', 'protocol']
