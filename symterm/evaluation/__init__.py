from symterm.evaluation.replace import replace
from symterm.evaluation.evaluator import evaluate, evaluate_step, execute
