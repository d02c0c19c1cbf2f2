import arc_ask.main as main_mod


def test_main_success(monkeypatch):
    """main() runs the CLI and exits with its status code."""
    calls = []
    monkeypatch.setattr(main_mod, 'cli_main', lambda: calls.append('cli_main_called') or 0)
    monkeypatch.setattr(main_mod.sys, 'exit', lambda code=0: calls.append(f'exit_{code}'))
    monkeypatch.setattr(main_mod, 'console', type('C', (), {'print': lambda *args, **kwargs: calls.append(('print', args))}))
    main_mod.main()
    assert calls == ['cli_main_called', 'exit_0']


def test_main_propagates_failure_code(monkeypatch):
    calls = []
    monkeypatch.setattr(main_mod, 'cli_main', lambda: 1)
    monkeypatch.setattr(main_mod.sys, 'exit', lambda code=0: calls.append(code))
    main_mod.main()
    assert calls == [1]


def test_main_exception(monkeypatch):
    """main() reports unexpected exceptions and exits with code 1."""
    def bad_main():
        raise RuntimeError('failure in cli')
    monkeypatch.setattr(main_mod, 'cli_main', bad_main)
    printed = []
    monkeypatch.setattr(main_mod, 'console', type('C', (), {'print': lambda msg: printed.append(msg)}))
    monkeypatch.setattr(main_mod.sys, 'exit', lambda code=1: printed.append(f'exit_{code}'))
    main_mod.main()
    assert any('unexpected error occurred' in str(m).lower() for m in printed)
    assert any('failure in cli' in str(m) for m in printed)
    assert 'exit_1' in printed


def test_unexpected_error_is_prefixed_and_escaped(monkeypatch):
    def bad_main():
        raise RuntimeError('bad key [bold] in payload')
    monkeypatch.setattr(main_mod, 'cli_main', bad_main)
    monkeypatch.setattr(main_mod.sys, 'exit', lambda code=1: None)
    console = main_mod.Console(stderr=True, record=True, width=200)
    monkeypatch.setattr(main_mod, 'console', console)
    main_mod.main()
    text = console.export_text()
    assert text.startswith('arc-ask: An unexpected error occurred')
    assert 'bad key [bold] in payload' in text
