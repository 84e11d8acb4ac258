import pytest
from quay.PARSERS.argument_parser import classify_arguments
from quay.errors import ConfigurationError, MissingDirectiveArgumentError


def test_passthrough_only():
    args = classify_arguments(['-d', '--build'])
    assert args.command_options == ['-d', '--build']
    assert args.include_names == []
    assert args.exclude_names == []
    assert args.port_tokens == []
    assert not args.has_directives


def test_directives_interleaved_with_options():
    args = classify_arguments([
        '-d', '--include', 'web', '--port', 'web:8080:80', '--build', '--include', 'db',
    ])
    assert args.command_options == ['-d', '--build']
    assert args.include_names == ['web', 'db']
    assert args.port_tokens == ['web:8080:80']
    assert args.has_directives


def test_exclude_collected():
    args = classify_arguments(['--exclude', 'worker', '--exclude', 'worker'])
    assert args.exclude_names == ['worker', 'worker']
    assert args.selection().exclude_names == frozenset({'worker'})


def test_port_alone_counts_as_directive():
    args = classify_arguments(['--port', 'not-a-mapping'])
    assert args.has_directives
    assert args.port_tokens == ['not-a-mapping']


@pytest.mark.parametrize('flag', ['--include', '--exclude', '--port'])
def test_directive_without_argument(flag):
    with pytest.raises(MissingDirectiveArgumentError) as excinfo:
        classify_arguments(['-d', flag])
    assert excinfo.value.flag == flag
    assert flag in str(excinfo.value)


def test_include_and_exclude_rejected():
    args = classify_arguments(['--include', 'web', '--exclude', 'db'])
    with pytest.raises(ConfigurationError):
        args.selection()


def test_directive_argument_taken_verbatim():
    args = classify_arguments(['--include', '--build'])
    assert args.include_names == ['--build']
    assert args.command_options == []
