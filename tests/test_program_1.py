from fern.__main__ import main


def test_program_1_arithmetic(capsys, example_path):
    main([example_path('program_1.fern')])
    out = capsys.readouterr().out.strip().split('\n')
    # right-associative power, left-associative subtraction, truncating division
    assert out == ['7', '9', '512', '3', '-3', '-1', 'true']
