"""Instruction prompt sent alongside the image."""

PROMPT_TEMPLATE = r"""Please analyze this image and convert it to LaTeX code suitable for Overleaf. 

IMPORTANT INSTRUCTIONS:
- Generate clean, properly formatted LaTeX code
- Use standard LaTeX packages when needed (\usepackage{{}} statements)
- For equations, use appropriate math environments ($, \begin{{equation}}, \begin{{align}}, etc.)
- For tables, use tabular environment with proper alignment
- For diagrams, provide TikZ code if possible, otherwise describe what's needed
- Ensure the code is copy-paste ready for Overleaf
- Include necessary package imports at the top if needed
- Use proper spacing and indentation
- Add comments for complex sections

{user_instructions}

Respond with ONLY the LaTeX code, no explanations or markdown formatting. Start directly with the LaTeX code."""

USER_INSTRUCTIONS_BLOCK = "\nSPECIAL USER INSTRUCTIONS:\n{instructions}\n"


def build_prompt(instructions: str = "") -> str:
    """Render the prompt, splicing in user instructions when given.

    Blank instructions leave the slot empty; other text is spliced in verbatim.
    """
    block = ""
    if instructions and instructions.strip():
        block = USER_INSTRUCTIONS_BLOCK.format(instructions=instructions)
    return PROMPT_TEMPLATE.format(user_instructions=block)
