"""Bash completion script generator.

The emitted script is self-contained: the command tree is stored in
associative arrays and the matcher is written in plain Bash with integer
arithmetic only. Helper functions return through global variables, so a
completion request never forks except for filesystem listing.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...common import render_template, sanitize_identifier
from ...commands.models import ValueKind
from ..buffers import build_string
from ..escaping import escape_bash
from ..models import FuzzyConfig

if TYPE_CHECKING:
    from ..models import CommandModel

__all__ = ["generate_bash"]


def _word(text: str) -> str:
    """One Bash word holding `text` literally."""
    return escape_bash(text) or "''"


def _write_words(buf: io.StringIO, words: Iterable[str]) -> None:
    line = " ".join(_word(word) for word in words)
    if line:
        buf.write(f"    {line}\n")


def _write_entry(buf: io.StringIO, key: str, value: str) -> None:
    buf.write(f"    [{_word(key)}]={_word(value)}\n")


def _context_tables(model: CommandModel) -> tuple[str, str]:
    """Return the flat option array body and the context -> slice table body."""
    slices: list[tuple[str, int, int]] = []
    offset = 0
    for path, options in model.contexts.items():
        slices.append((path, offset, len(options)))
        offset += len(options)

    def fill_options(buf: io.StringIO) -> None:
        for options in model.contexts.values():
            _write_words(buf, options)

    def fill_contexts(buf: io.StringIO) -> None:
        for path, start, count in slices:
            _write_entry(buf, path, f"{start} {count}")

    return build_string(fill_options), build_string(fill_contexts)


def _flag_tables(model: CommandModel) -> tuple[str, str, str]:
    """Return the flag parameter, enum value and enum slice table bodies."""
    enum_params = [param for param in model.flag_params if param.value_kind is ValueKind.ENUM]

    def fill_params(buf: io.StringIO) -> None:
        for param in model.flag_params:
            _write_entry(buf, param.key, f"{param.requirement}|{param.value_kind}")

    def fill_values(buf: io.StringIO) -> None:
        for param in enum_params:
            _write_words(buf, param.enum_options)

    def fill_slices(buf: io.StringIO) -> None:
        offset = 0
        for param in enum_params:
            _write_entry(buf, param.key, f"{offset} {len(param.enum_options)}")
            offset += len(param.enum_options)

    return build_string(fill_params), build_string(fill_values), build_string(fill_slices)


def generate_bash(model: CommandModel, program_name: str, config: FuzzyConfig | None = None) -> str:
    """Generate the bash completion script.

    Args:
        model: The collected command model
        program_name: Name of the program to complete
        config: Fuzzy matcher tunables

    Returns:
        The bash completion script content
    """
    config = config or FuzzyConfig()
    options, contexts = _context_tables(model)
    flag_params, enum_values, enum_slices = _flag_tables(model)
    return render_template(
        BASH_TEMPLATE,
        {
            "I": sanitize_identifier(program_name),
            "Program": _word(program_name),
            "FuzzyEnabled": "1" if config.enabled else "0",
            "MaxCandidates": str(config.max_candidates),
            "MinPatternLength": str(config.min_pattern_length),
            "ScoreThreshold": str(config.score_threshold),
            "MaxResults": str(config.max_results),
            "CacheMaxSize": str(config.cache_max_size),
            "Options": options,
            "Contexts": contexts,
            "FlagParams": flag_params,
            "EnumValues": enum_values,
            "EnumSlices": enum_slices,
        },
    )


BASH_TEMPLATE = r"""#!/usr/bin/env bash
# Bash completion for {{Program}}, generated by qflag.
# Requires bash 4.2 or newer (associative arrays).
# Lengths and case folding follow the locale: under a UTF-8 locale
# non-ASCII names are scored by character, under LC_ALL=C by byte.
#
#   source <({{Program}} --completion bash)

if (( BASH_VERSINFO[0] < 4 || (BASH_VERSINFO[0] == 4 && BASH_VERSINFO[1] < 2) )); then
    return 0 2>/dev/null || exit 0
fi

# ==================== Fuzzy matching configuration ====================
# Set to 0 to disable fuzzy matching
{{I}}_FUZZY_COMPLETION_ENABLED={{FuzzyEnabled}}
# Above this many candidates only case-sensitive prefix matching is done
{{I}}_FUZZY_MAX_CANDIDATES={{MaxCandidates}}
# Shorter patterns never use fuzzy matching
{{I}}_FUZZY_MIN_PATTERN_LENGTH={{MinPatternLength}}
# Minimum fuzzy score (0-100) for a candidate to be offered
{{I}}_FUZZY_SCORE_THRESHOLD={{ScoreThreshold}}
{{I}}_FUZZY_MAX_RESULTS={{MaxResults}}
# The score cache is emptied once it grows past this many entries
{{I}}_FUZZY_CACHE_MAX_SIZE={{CacheMaxSize}}

# ==================== Command tree ====================
# Options of every context, flattened; _{{I}}_contexts maps a context
# path to the "offset count" slice holding its options.
declare -ga _{{I}}_options=(
{{Options}})
declare -gA _{{I}}_contexts=(
{{Contexts}})

# "context|flag" -> "requirement|value kind"
declare -gA _{{I}}_flag_params=(
{{FlagParams}})

# Enum values, flattened; _{{I}}_enum_slices maps "context|flag" to a slice.
declare -ga _{{I}}_enum_values=(
{{EnumValues}})
declare -gA _{{I}}_enum_slices=(
{{EnumSlices}})

# "pattern|candidate" -> score, kept for the whole shell session
declare -gA _{{I}}_fuzzy_cache=()

# Return registers
declare -g _{{I}}_score=0
declare -g _{{I}}_context=/
declare -ga _{{I}}_matches=()
declare -ga _{{I}}_candidates=()

# ==================== Fuzzy matching ====================

# Score how well pattern $1 approximately matches candidate $2.
# Sets _{{I}}_score to an integer between 0 and 100.
_{{I}}_fuzzy_score() {
    local pattern="$1" candidate="$2"
    local pattern_len=${#pattern} candidate_len=${#candidate}
    _{{I}}_score=0

    if (( pattern_len == 0 )); then
        _{{I}}_score=100
        return 0
    fi
    # Candidate shorter than the pattern
    if (( candidate_len < pattern_len )); then
        return 0
    fi

    local pattern_lower="${pattern,,}" candidate_lower="${candidate,,}"
    # Case-insensitive prefix
    if [[ "$candidate_lower" == "$pattern_lower"* ]]; then
        _{{I}}_score=100
        return 0
    fi

    local i j char
    # Every pattern character must occur in the candidate
    for (( i = 0; i < pattern_len; i++ )); do
        char="${pattern_lower:i:1}"
        if [[ "$candidate_lower" != *"$char"* ]]; then
            return 0
        fi
    done

    local matched=0 consecutive=0 max_consecutive=0 position=0 start_bonus=0 found
    if [[ "$candidate_lower" == "$pattern_lower"* ]]; then
        start_bonus=20
    fi

    # Greedy forward subsequence scan
    for (( i = 0; i < pattern_len; i++ )); do
        char="${pattern_lower:i:1}"
        found=-1
        for (( j = position; j < candidate_len; j++ )); do
            if [[ "${candidate_lower:j:1}" == "$char" ]]; then
                found=$j
                break
            fi
        done
        if (( found < 0 )); then
            consecutive=0
            continue
        fi
        matched=$(( matched + 1 ))
        if (( found == position )); then
            consecutive=$(( consecutive + 1 ))
        else
            consecutive=1
        fi
        if (( consecutive > max_consecutive )); then
            max_consecutive=$consecutive
        fi
        position=$(( found + 1 ))
    done

    local penalty=$(( candidate_len - pattern_len ))
    if (( penalty > 10 )); then
        penalty=10
    fi
    local score=$(( matched * 60 / pattern_len + max_consecutive * 20 / pattern_len + start_bonus - penalty ))
    if (( score < 0 )); then
        score=0
    elif (( score > 100 )); then
        score=100
    fi
    _{{I}}_score=$score
}

# Memoized _{{I}}_fuzzy_score.
_{{I}}_fuzzy_score_cached() {
    local key="$1|$2"
    if [[ -n "${_{{I}}_fuzzy_cache[$key]+set}" ]]; then
        _{{I}}_score=${_{{I}}_fuzzy_cache[$key]}
        return 0
    fi
    _{{I}}_fuzzy_score "$1" "$2"
    if (( ${#_{{I}}_fuzzy_cache[@]} > {{I}}_FUZZY_CACHE_MAX_SIZE )); then
        _{{I}}_fuzzy_cache=()
    fi
    _{{I}}_fuzzy_cache[$key]=$_{{I}}_score
}

# Match pattern $1 against the remaining arguments, best first.
# Sets the _{{I}}_matches array.
_{{I}}_match() {
    local pattern="$1"
    shift
    local candidate
    _{{I}}_matches=()

    # Tier 1: case-sensitive prefix
    for candidate in "$@"; do
        if [[ "$candidate" == "$pattern"* ]]; then
            _{{I}}_matches+=("$candidate")
        fi
    done
    # Too many candidates: stay with prefix matching
    if (( $# > {{I}}_FUZZY_MAX_CANDIDATES || ${#_{{I}}_matches[@]} > 0 )); then
        return 0
    fi

    # Tier 2: case-insensitive prefix
    local pattern_lower="${pattern,,}"
    for candidate in "$@"; do
        if [[ "${candidate,,}" == "$pattern_lower"* ]]; then
            _{{I}}_matches+=("$candidate")
        fi
    done
    if (( ${#_{{I}}_matches[@]} > 0 )); then
        return 0
    fi

    # Tier 3: fuzzy score
    if (( {{I}}_FUZZY_COMPLETION_ENABLED && ${#pattern} >= {{I}}_FUZZY_MIN_PATTERN_LENGTH )); then
        local -a ranked=() scores=()
        local i
        for candidate in "$@"; do
            _{{I}}_fuzzy_score_cached "$pattern" "$candidate"
            if (( _{{I}}_score < {{I}}_FUZZY_SCORE_THRESHOLD )); then
                continue
            fi
            # Stable insertion: after every entry scoring at least as high
            i=${#ranked[@]}
            while (( i > 0 && scores[i - 1] < _{{I}}_score )); do
                scores[i]=${scores[i - 1]}
                ranked[i]="${ranked[i - 1]}"
                i=$(( i - 1 ))
            done
            scores[i]=$_{{I}}_score
            ranked[i]="$candidate"
        done
        if (( ${#ranked[@]} > 0 )); then
            _{{I}}_matches=("${ranked[@]:0:{{I}}_FUZZY_MAX_RESULTS}")
            return 0
        fi
    fi

    # Tier 4: case-insensitive substring
    for candidate in "$@"; do
        if [[ "${candidate,,}" == *"$pattern_lower"* ]]; then
            _{{I}}_matches+=("$candidate")
        fi
    done
    return 0
}

# ==================== Context resolution ====================

# Descend through the words given as arguments (program name excluded).
# Sets _{{I}}_context.
_{{I}}_resolve_context() {
    local word
    _{{I}}_context=/
    for word in "$@"; do
        if [[ "$word" == -* ]]; then
            break
        fi
        if [[ -z "${_{{I}}_contexts[$_{{I}}_context$word/]+set}" ]]; then
            break
        fi
        _{{I}}_context="$_{{I}}_context$word/"
    done
    return 0
}

# Sets _{{I}}_candidates to the options of context $1.
_{{I}}_context_options() {
    local slice="${_{{I}}_contexts[$1]-}"
    _{{I}}_candidates=()
    if [[ -n "$slice" ]]; then
        _{{I}}_candidates=("${_{{I}}_options[@]:${slice% *}:${slice#* }}")
    fi
    return 0
}

# Quote every match with %q so readline inserts it as a single word.
_{{I}}_quote_matches() {
    local i
    for i in "${!_{{I}}_matches[@]}"; do
        printf -v "_{{I}}_matches[$i]" "%q" "${_{{I}}_matches[i]}"
    done
    return 0
}

# Sets _{{I}}_matches to the files and directories starting with $1.
_{{I}}_path_completions() {
    local entry
    _{{I}}_matches=()
    while IFS= read -r entry; do
        if [[ -d "$entry" ]]; then
            _{{I}}_matches+=("$entry/")
        else
            _{{I}}_matches+=("$entry")
        fi
    done < <(compgen -f -- "$1" 2>/dev/null)
    return 0
}

# ==================== Completion entry point ====================

_{{I}}_complete() {
    local cur cword
    local -a words=()
    if declare -F _get_comp_words_by_ref >/dev/null 2>&1; then
        _get_comp_words_by_ref -n =: -w words -i cword 2>/dev/null
    fi
    if (( ${#words[@]} == 0 )); then
        words=("${COMP_WORDS[@]}")
        cword=$COMP_CWORD
    fi
    cur="${words[cword]-}"

    _{{I}}_resolve_context "${words[@]:1:cword-1}"

    # Value of the flag typed just before
    if (( cword > 1 )); then
        local key="$_{{I}}_context|${words[cword-1]}"
        local param="${_{{I}}_flag_params[$key]-}"
        case "${param#*|}" in
            enum)
                local slice="${_{{I}}_enum_slices[$key]-}"
                local -a values=()
                if [[ -n "$slice" ]]; then
                    values=("${_{{I}}_enum_values[@]:${slice% *}:${slice#* }}")
                fi
                _{{I}}_match "$cur" "${values[@]}"
                _{{I}}_quote_matches
                COMPREPLY=("${_{{I}}_matches[@]}")
                return 0
                ;;
            string)
                _{{I}}_path_completions "$cur"
                # readline quotes file names itself
                compopt -o filenames 2>/dev/null
                COMPREPLY=("${_{{I}}_matches[@]}")
                if (( ${#COMPREPLY[@]} == 1 )) && [[ "${COMPREPLY[0]}" == */ ]]; then
                    compopt -o nospace 2>/dev/null
                fi
                return 0
                ;;
        esac
    fi

    _{{I}}_context_options "$_{{I}}_context"
    _{{I}}_match "$cur" "${_{{I}}_candidates[@]}"
    _{{I}}_quote_matches
    COMPREPLY=("${_{{I}}_matches[@]}")
    return 0
}

_{{I}}() {
    COMPREPLY=()
    # Lookups of absent keys must not abort under set -u
    local nounset=0
    if [[ $- == *u* ]]; then
        nounset=1
        set +u
    fi
    # Prefix tiers must stay case-sensitive
    local nocasematch=0
    if shopt -q nocasematch; then
        nocasematch=1
        shopt -u nocasematch
    fi
    _{{I}}_complete 2>/dev/null
    if (( nocasematch )); then
        shopt -s nocasematch
    fi
    if (( nounset )); then
        set -u
    fi
    return 0
}

# ==================== Diagnostics ====================

_{{I}}_completion_debug() {
    printf '=== %s bash completion diagnostics ===\n' {{Program}}
    printf 'Bash version: %s\n' "$BASH_VERSION"
    if complete -p {{Program}} >/dev/null 2>&1; then
        printf 'Completion function: registered\n'
    else
        printf 'Completion function: not registered\n'
    fi
    printf 'Contexts: %d\n' "${#_{{I}}_contexts[@]}"
    printf 'Flag parameters: %d\n' "${#_{{I}}_flag_params[@]}"
    printf 'Fuzzy matching: %s\n' "$(( {{I}}_FUZZY_COMPLETION_ENABLED ? 1 : 0 ))"
    printf 'Candidate limit: %d\n' "${{I}}_FUZZY_MAX_CANDIDATES"
    printf 'Cache entries: %d/%d\n' "${#_{{I}}_fuzzy_cache[@]}" "${{I}}_FUZZY_CACHE_MAX_SIZE"
}

complete -F _{{I}} {{Program}}
"""
