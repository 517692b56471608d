from fern.__main__ import main


def test_program_5_elif_chain(capsys, example_path):
    main([example_path('program_5.fern')])
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['-1', '0', '1', '-7']
