from quay.MANAGERS.topology_assembler import assemble_topology
from quay.MODELS.selection import MissingNamesReport
from quay.MODELS.topology import Topology


def test_assemble_replaces_services_only():
    original = Topology.model_validate({
        'name': 'shop',
        'services': {
            'web': {'image': 'nginx', 'networks': ['front']},
            'db': {'image': 'postgres', 'networks': ['back']},
        },
        'networks': {'front': {}, 'back': {'internal': True}},
        'secrets': {'token': {'file': './token.txt'}},
    })
    assembled = assemble_topology(original, {'web': original.services['web']})

    assert assembled.service_names == ['web']
    assert assembled.sections == original.sections
    # dangling references are not pruned
    assert assembled.to_document()['networks'] == {'front': {}, 'back': {'internal': True}}
    assert original.service_names == ['web', 'db']


def test_missing_report_merge():
    report = MissingNamesReport.merge(['b', 'z'], ['cache', 'z'])
    assert report.names == ['b', 'z', 'cache']
    assert report


def test_missing_report_empty():
    report = MissingNamesReport.merge([], [])
    assert not report


def test_missing_report_format():
    report = MissingNamesReport(names=['z', 'cache'])
    assert report.format().splitlines() == [
        'Warning: Some requested services were not found in the compose file:',
        '  - z',
        '  - cache',
    ]
