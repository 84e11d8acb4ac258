# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for service selection.
"""
from quay.MANAGERS.selection_engine import select_services
from quay.MODELS.topology import Topology


def make_topology():
    return Topology.model_validate({
        'services': {
            'a': {'image': 'nginx', 'networks': ['front']},
            'b': {'image': 'redis'},
            'c': {'image': 'postgres', 'volumes': ['data:/var/lib/postgresql/data']},
        },
        'networks': {'front': {'driver': 'bridge'}},
        'volumes': {'data': {}},
        'x-common': {'restart': 'always'},
    })


class TestSelectServices:
    """Tests for select_services."""

    def test_include_mode(self):
        """Only included services survive; unknown names are reported."""
        topology = make_topology()
        result, missing = select_services(topology, include_names={'a', 'c', 'z'})
        assert result.service_names == ['a', 'c']
        assert missing == ['z']

    def test_exclude_mode(self):
        """Excluded services are dropped; unknown names are reported."""
        topology = make_topology()
        result, missing = select_services(topology, exclude_names={'b', 'z'})
        assert result.service_names == ['a', 'c']
        assert missing == ['z']

    def test_no_directive_is_identity(self):
        """Without include or exclude the topology is returned as is."""
        topology = make_topology()
        result, missing = select_services(topology)
        assert result is topology
        assert missing == []

    def test_identity_matches_include_everything(self):
        topology = make_topology()
        identity, _ = select_services(topology)
        everything, missing = select_services(topology, include_names=set(topology.service_names))
        assert everything.to_document() == identity.to_document()
        assert missing == []

    def test_missing_names_sorted(self):
        topology = make_topology()
        _, missing = select_services(topology, include_names={'zeta', 'alpha', 'Mid'})
        assert missing == ['Mid', 'alpha', 'zeta']

    def test_case_sensitive(self):
        topology = make_topology()
        result, missing = select_services(topology, include_names={'A'})
        assert result.services == {}
        assert missing == ['A']

    def test_duplicates_in_list(self):
        topology = make_topology()
        result, missing = select_services(topology, include_names=['a', 'a', 'z', 'z'])
        assert result.service_names == ['a']
        assert missing == ['z']

    def test_empty_topology(self):
        """An empty topology reports every included name without failing."""
        topology = Topology()
        result, missing = select_services(topology, include_names={'web', 'db'})
        assert result.services == {}
        assert missing == ['db', 'web']

    def test_declaration_order_kept(self):
        topology = make_topology()
        result, _ = select_services(topology, include_names={'c', 'a'})
        assert result.service_names == ['a', 'c']

    def test_other_sections_untouched(self):
        """Networks, volumes and extensions are copied through in every mode."""
        topology = make_topology()
        for kwargs in ({'include_names': {'b'}}, {'exclude_names': {'a', 'c'}}, {}):
            result, _ = select_services(topology, **kwargs)
            assert result.sections == topology.sections
            assert result.to_document()['networks'] == {'front': {'driver': 'bridge'}}
            assert result.to_document()['volumes'] == {'data': {}}
            assert result.to_document()['x-common'] == {'restart': 'always'}

    def test_input_not_modified(self):
        topology = make_topology()
        select_services(topology, exclude_names={'a'})
        assert topology.service_names == ['a', 'b', 'c']

    def test_service_fields_preserved(self):
        topology = make_topology()
        result, _ = select_services(topology, include_names={'c'})
        assert result.to_document()['services'] == {
            'c': {'image': 'postgres', 'volumes': ['data:/var/lib/postgresql/data']},
        }
