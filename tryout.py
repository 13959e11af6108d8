from rdcalc.session import evaluate, format_result
from rdcalc.tokenizer import tokenize, untokenize
from rdcalc.utils import CalcError

for code in [
    "5",
    "-1",
    "1 + 1",
    "-1 + 1",
    "1 + -1",
    "4 + 6 * 3",
    "(4 + 6)",
    "(4+6) * 3",
    "{4+6} * (3 - 1)",
    "80225/+2",
    "7/6/2000",
    "7 % 2.5",
    "5! / 3!",
    "1.5e3 + .25",
    "2+3; 4*5;",
    "(1+2",
    "1 / (2 - 2)",
    "3 $ 4",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = tokenize(code)
    except CalcError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")
    print(f"untokenized: {untokenize(tokens)}")

    try:
        results = evaluate(code)
    except CalcError as e:
        print(e)
        continue
    results_str = "\n".join(f" {i + 1:> 2}: {format_result(res)}" for i, res in enumerate(results))
    print(f"statement results:\n{results_str}")
