"""Prompt for generating step-by-step operation plans."""

PLAN_HUMAN_PROMPT = (
    "Please create a detailed step-by-step plan for the following operation:\n\n"
    "{question}\n\n"
    "For each step, include:\n"
    "1. What needs to be done\n"
    "2. Why it's necessary\n"
    "3. Expected outcome\n"
    "4. Potential risks or considerations"
)
