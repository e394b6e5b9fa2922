from __future__ import annotations

#: zsh code that hooks ``space-prompt`` into the shell.  The start time of each
#: command is recorded by ``preexec``; ``precmd`` turns it into a duration (in
#: nanoseconds) and passes that, the exit status, and the number of background
#: jobs to ``space-prompt``.
ZSH_INIT = r"""
zmodload zsh/parameter

_space_prompt_render() {
    PROMPT="$(command space-prompt --zsh --status="${_space_prompt_status:-0}" --duration="${_space_prompt_duration-}" --jobs="${#jobstates}")"
}

_space_prompt_precmd() {
    _space_prompt_status=$?
    if [[ -n "${_space_prompt_start+1}" ]]; then
        _space_prompt_duration=$(( $(date +%s%N) - _space_prompt_start ))
        unset _space_prompt_start
    else
        unset _space_prompt_duration
    fi
    _space_prompt_render
}

_space_prompt_preexec() {
    _space_prompt_start=$(date +%s%N)
}

_space_prompt_keymap_select() {
    _space_prompt_render
    zle reset-prompt
}

[[ -z "${precmd_functions+1}" ]] && precmd_functions=()
[[ -z "${preexec_functions+1}" ]] && preexec_functions=()
if [[ -z ${precmd_functions[(re)_space_prompt_precmd]} ]]; then
    precmd_functions+=(_space_prompt_precmd)
fi
if [[ -z ${preexec_functions[(re)_space_prompt_preexec]} ]]; then
    preexec_functions+=(_space_prompt_preexec)
fi

zle -N zle-keymap-select _space_prompt_keymap_select

_space_prompt_start=$(date +%s%N)
"""

SHELLS = {
    "zsh": ZSH_INIT,
}


def init_script(shell: str) -> str:
    """Return the code for hooking ``space-prompt`` into the given shell"""
    return SHELLS[shell].lstrip("\n")
