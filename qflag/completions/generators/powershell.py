"""PowerShell completion script generator."""

from __future__ import annotations

import io
import os
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...common import render_template, sanitize_identifier
from ..buffers import build_string
from ..escaping import escape_powershell, quote_powershell
from ..models import FuzzyConfig

if TYPE_CHECKING:
    from ..models import CommandModel

__all__ = ["generate_powershell", "powershell_name"]


def powershell_name(program_name: str) -> str:
    """Identifier used in function and variable names, e.g. "my-tool.exe" -> "my_tool"."""
    return sanitize_identifier(os.path.splitext(program_name)[0])


def _array(values: Iterable[str]) -> str:
    return "@(" + ", ".join(quote_powershell(value) for value in values) + ")"


def _cmd_tree(model: CommandModel) -> str:
    def fill(buf: io.StringIO) -> None:
        for path, options in model.contexts.items():
            buf.write(f"    @{{ Context = {quote_powershell(path)}; Options = {_array(options)} }}\n")

    return build_string(fill)


def _flag_params(model: CommandModel) -> str:
    def fill(buf: io.StringIO) -> None:
        for param in model.flag_params:
            buf.write(
                f"    @{{ Context = {quote_powershell(param.command_path)};"
                f" Parameter = {quote_powershell(param.name)};"
                f" ParamType = {quote_powershell(param.requirement)};"
                f" ValueType = {quote_powershell(param.value_kind)};"
                f" Options = {_array(param.enum_options)} }}\n"
            )

    return build_string(fill)


def generate_powershell(model: CommandModel, program_name: str, config: FuzzyConfig | None = None) -> str:
    """Generate the PowerShell completion script.

    Args:
        model: The collected command model
        program_name: Name of the program to complete, possibly with an extension
        config: Fuzzy matcher tunables

    Returns:
        The PowerShell completion script content
    """
    config = config or FuzzyConfig()
    return render_template(
        PWSH_TEMPLATE,
        {
            "S": powershell_name(program_name),
            "ProgramComment": escape_powershell(program_name),
            "Program": quote_powershell(program_name),
            "FuzzyEnabled": "$true" if config.enabled else "$false",
            "MaxCandidates": str(config.max_candidates),
            "MinPatternLength": str(config.min_pattern_length),
            "ScoreThreshold": str(config.score_threshold),
            "MaxResults": str(config.max_results),
            "CacheMaxSize": str(config.cache_max_size),
            "CmdTree": _cmd_tree(model),
            "FlagParams": _flag_params(model),
        },
    )


PWSH_TEMPLATE = r"""# PowerShell completion for {{ProgramComment}}, generated by qflag.
#
#   & {{ProgramComment}} --completion pwsh | Out-String | Invoke-Expression

$script:{{S}}_commandName = {{Program}}

# ==================== Command tree ====================
# Options (flags and subcommands) of every context path
$script:{{S}}_cmdTree = @(
{{CmdTree}})

# Flags expecting a value, keyed by context and flag name
$script:{{S}}_flagParams = @(
{{FlagParams}})

# ==================== Fuzzy matching configuration ====================
# Set to $false to disable fuzzy matching
$script:{{S}}_FUZZY_COMPLETION_ENABLED = {{FuzzyEnabled}}
# Above this many candidates only case-sensitive prefix matching is done
$script:{{S}}_FUZZY_MAX_CANDIDATES = {{MaxCandidates}}
# Shorter patterns never use fuzzy matching
$script:{{S}}_FUZZY_MIN_PATTERN_LENGTH = {{MinPatternLength}}
# Minimum fuzzy score (0-100) for a candidate to be offered
$script:{{S}}_FUZZY_SCORE_THRESHOLD = {{ScoreThreshold}}
$script:{{S}}_FUZZY_MAX_RESULTS = {{MaxResults}}
# The score cache is emptied once it grows past this many entries
$script:{{S}}_FUZZY_CACHE_MAX_SIZE = {{CacheMaxSize}}

# "pattern|candidate" -> score, kept for the whole session
$script:{{S}}_fuzzyCache = [System.Collections.Generic.Dictionary[string, int]]::new([System.StringComparer]::Ordinal)

# Built on first use
$script:{{S}}_contextIndex = $null
$script:{{S}}_flagIndex = $null

# Completion texts containing one of these are returned single-quoted
$script:{{S}}_specialChars = [char[]](" `t`r`n" + '$`&|;<>(){}@#,"' + [char]0x27 + [char]0x2018 + [char]0x2019 + [char]0x201A + [char]0x201B)

# ==================== Fuzzy matching ====================

# Score how well $Pattern approximately matches $Candidate, 0-100
function Get-{{S}}FuzzyScore {
    param(
        [string]$Pattern,
        [string]$Candidate
    )

    $patternLen = $Pattern.Length
    $candidateLen = $Candidate.Length
    if ($patternLen -eq 0) {
        return 100
    }
    # Candidate shorter than the pattern
    if ($candidateLen -lt $patternLen) {
        return 0
    }

    $patternLower = $Pattern.ToLowerInvariant()
    $candidateLower = $Candidate.ToLowerInvariant()
    # Case-insensitive prefix
    if ($candidateLower.StartsWith($patternLower, [System.StringComparison]::Ordinal)) {
        return 100
    }

    $patternChars = $patternLower.ToCharArray()
    # Every pattern character must occur in the candidate
    foreach ($char in $patternChars) {
        if ($candidateLower.IndexOf($char) -lt 0) {
            return 0
        }
    }

    $startBonus = 0
    if ($candidateLower.StartsWith($patternLower, [System.StringComparison]::Ordinal)) {
        $startBonus = 20
    }

    $matched = 0
    $consecutive = 0
    $maxConsecutive = 0
    $position = 0
    # Greedy forward subsequence scan
    foreach ($char in $patternChars) {
        $found = $candidateLower.IndexOf($char, $position)
        if ($found -lt 0) {
            $consecutive = 0
            continue
        }
        $matched++
        if ($found -eq $position) {
            $consecutive++
        } else {
            $consecutive = 1
        }
        if ($consecutive -gt $maxConsecutive) {
            $maxConsecutive = $consecutive
        }
        $position = $found + 1
    }

    $baseScore = [int][Math]::Floor(($matched * 60) / $patternLen)
    $consecutiveBonus = [int][Math]::Floor(($maxConsecutive * 20) / $patternLen)
    $lengthPenalty = [Math]::Min($candidateLen - $patternLen, 10)
    $score = $baseScore + $consecutiveBonus + $startBonus - $lengthPenalty
    return [Math]::Max(0, [Math]::Min(100, $score))
}

# Memoized Get-{{S}}FuzzyScore
function Get-{{S}}FuzzyScoreCached {
    param(
        [string]$Pattern,
        [string]$Candidate
    )

    $key = "$Pattern|$Candidate"
    $score = 0
    if ($script:{{S}}_fuzzyCache.TryGetValue($key, [ref]$score)) {
        return $score
    }
    $score = Get-{{S}}FuzzyScore -Pattern $Pattern -Candidate $Candidate
    if ($script:{{S}}_fuzzyCache.Count -gt $script:{{S}}_FUZZY_CACHE_MAX_SIZE) {
        $script:{{S}}_fuzzyCache.Clear()
    }
    $script:{{S}}_fuzzyCache[$key] = $score
    return $score
}

# Match $Pattern against $Options, best first
function Get-{{S}}IntelligentMatches {
    param(
        [string]$Pattern,
        [string[]]$Options = @()
    )

    if ($null -eq $Options) {
        return
    }

    # Tier 1: case-sensitive prefix
    $exact = [System.Collections.Generic.List[string]]::new()
    foreach ($option in $Options) {
        if ($option.StartsWith($Pattern, [System.StringComparison]::Ordinal)) {
            $exact.Add($option)
        }
    }
    # Too many candidates: stay with prefix matching
    if ($Options.Count -gt $script:{{S}}_FUZZY_MAX_CANDIDATES -or $exact.Count -gt 0) {
        return $exact.ToArray()
    }

    # Tier 2: case-insensitive prefix
    $patternLower = $Pattern.ToLowerInvariant()
    $insensitive = [System.Collections.Generic.List[string]]::new()
    foreach ($option in $Options) {
        if ($option.ToLowerInvariant().StartsWith($patternLower, [System.StringComparison]::Ordinal)) {
            $insensitive.Add($option)
        }
    }
    if ($insensitive.Count -gt 0) {
        return $insensitive.ToArray()
    }

    # Tier 3: fuzzy score
    if ($script:{{S}}_FUZZY_COMPLETION_ENABLED -and $Pattern.Length -ge $script:{{S}}_FUZZY_MIN_PATTERN_LENGTH) {
        $ranked = [System.Collections.Generic.List[string]]::new()
        $scores = [System.Collections.Generic.List[int]]::new()
        foreach ($option in $Options) {
            $score = Get-{{S}}FuzzyScoreCached -Pattern $Pattern -Candidate $option
            if ($score -lt $script:{{S}}_FUZZY_SCORE_THRESHOLD) {
                continue
            }
            # Stable insertion: after every entry scoring at least as high
            $i = $ranked.Count
            while ($i -gt 0 -and $scores[$i - 1] -lt $score) {
                $i--
            }
            $ranked.Insert($i, $option)
            $scores.Insert($i, $score)
        }
        if ($ranked.Count -gt 0) {
            $count = [Math]::Min($ranked.Count, $script:{{S}}_FUZZY_MAX_RESULTS)
            return $ranked.GetRange(0, $count).ToArray()
        }
    }

    # Tier 4: case-insensitive substring
    $substring = [System.Collections.Generic.List[string]]::new()
    foreach ($option in $Options) {
        if ($option.ToLowerInvariant().Contains($patternLower)) {
            $substring.Add($option)
        }
    }
    return $substring.ToArray()
}

# Probe: score of one pattern/candidate pair and whether it passes the threshold
function Test-{{S}}FuzzyMatch {
    param(
        [string]$Pattern,
        [string]$Candidate
    )

    $score = Get-{{S}}FuzzyScoreCached -Pattern $Pattern -Candidate $Candidate
    [pscustomobject]@{
        Pattern   = $Pattern
        Candidate = $Candidate
        Score     = $score
        Matched   = ($score -ge $script:{{S}}_FUZZY_SCORE_THRESHOLD)
    }
}

# ==================== Path completion ====================

# Files and directories starting with $WordToComplete, directories suffixed with "/"
function Get-{{S}}PathCompletions {
    param(
        [string]$WordToComplete
    )

    $slash = $WordToComplete.LastIndexOfAny([char[]]'/\')
    if ($slash -ge 0) {
        $prefix = $WordToComplete.Substring(0, $slash + 1)
        $name = $WordToComplete.Substring($slash + 1)
        $base = $prefix
    } else {
        $prefix = ''
        $name = $WordToComplete
        $base = '.'
    }

    $entries = [System.Collections.Generic.Dictionary[string, bool]]::new([System.StringComparer]::Ordinal)
    try {
        foreach ($item in @(Get-ChildItem -LiteralPath $base -Force -ErrorAction Stop)) {
            $entries[$item.Name] = [bool]$item.PSIsContainer
        }
    }
    catch {
        Write-Debug "$($script:{{S}}_commandName) path completion: $($_.Exception.Message)"
        return
    }

    $names = [string[]]@($entries.Keys)
    [Array]::Sort($names, [System.StringComparer]::Ordinal)
    foreach ($entry in $names) {
        if (-not $entry.StartsWith($name, [System.StringComparison]::Ordinal)) {
            continue
        }
        # Hidden entries only when asked for
        if ($entry.StartsWith('.') -and -not $name.StartsWith('.')) {
            continue
        }
        if ($entries[$entry]) {
            "$prefix$entry/"
        } else {
            "$prefix$entry"
        }
    }
}

# ==================== Completion logic ====================

function Initialize-{{S}}Indexes {
    $contextIndex = [System.Collections.Generic.Dictionary[string, string[]]]::new([System.StringComparer]::Ordinal)
    foreach ($item in $script:{{S}}_cmdTree) {
        $contextIndex[$item.Context] = [string[]]@($item.Options)
    }
    $flagIndex = [System.Collections.Generic.Dictionary[string, object]]::new([System.StringComparer]::Ordinal)
    foreach ($flag in $script:{{S}}_flagParams) {
        $key = "$($flag.Context)|$($flag.Parameter)"
        if (-not $flagIndex.ContainsKey($key)) {
            $flagIndex.Add($key, $flag)
        }
    }
    $script:{{S}}_flagIndex = $flagIndex
    $script:{{S}}_contextIndex = $contextIndex
}

# Candidates for $WordToComplete after the already typed $Words (program name first)
function Get-{{S}}Completions {
    param(
        [string[]]$Words = @(),
        [string]$WordToComplete
    )

    if ($null -eq $script:{{S}}_contextIndex) {
        Initialize-{{S}}Indexes
    }

    $context = '/'
    for ($i = 1; $i -lt $Words.Count; $i++) {
        $word = $Words[$i]
        if ($word.StartsWith('-', [System.StringComparison]::Ordinal)) {
            break
        }
        $next = "$context$word/"
        if (-not $script:{{S}}_contextIndex.ContainsKey($next)) {
            break
        }
        $context = $next
    }

    # Value of the flag typed just before
    if ($Words.Count -gt 1) {
        $param = $null
        if ($script:{{S}}_flagIndex.TryGetValue("$context|$($Words[-1])", [ref]$param)) {
            switch -CaseSensitive ($param.ValueType) {
                'enum' {
                    return Get-{{S}}IntelligentMatches -Pattern $WordToComplete -Options ([string[]]@($param.Options))
                }
                'string' {
                    return Get-{{S}}PathCompletions -WordToComplete $WordToComplete
                }
            }
        }
    }

    $options = $null
    if ($script:{{S}}_contextIndex.TryGetValue($context, [ref]$options)) {
        return Get-{{S}}IntelligentMatches -Pattern $WordToComplete -Options $options
    }
}

function ConvertTo-{{S}}CompletionResult {
    param(
        [string[]]$Values = @()
    )

    foreach ($value in $Values) {
        $text = $value
        if ($value.Length -eq 0 -or $value.IndexOfAny($script:{{S}}_specialChars) -ge 0) {
            $text = "'" + ($value -replace '[\u0027\u2018-\u201B]', '$0$0') + "'"
        }
        $display = if ($value.Length -eq 0) { $text } else { $value }
        [System.Management.Automation.CompletionResult]::new($text, $display, 'ParameterValue', $display)
    }
}

$script:{{S}}_scriptBlock = {
    param(
        $wordToComplete,
        $commandAst,
        $cursorPosition
    )

    try {
        $words = @($commandAst.CommandElements |
            Where-Object { $_.Extent.StartOffset -lt $cursorPosition } |
            ForEach-Object { $_.Extent.Text })
        # The word being completed is not part of the typed words
        if ($wordToComplete -and $words.Count -gt 0) {
            if ($words.Count -gt 1) {
                $words = @($words[0..($words.Count - 2)])
            } else {
                $words = @()
            }
        }
        $candidates = @(Get-{{S}}Completions -Words $words -WordToComplete $wordToComplete)
        ConvertTo-{{S}}CompletionResult -Values $candidates
    }
    catch {
        Write-Debug "$($script:{{S}}_commandName) completion: $($_.Exception.Message)"
        return @()
    }
}

# ==================== Diagnostics ====================

function Get-{{S}}CompletionDebug {
    Write-Host ('=== {0} PowerShell completion diagnostics ===' -f $script:{{S}}_commandName) -ForegroundColor Cyan
    Write-Host ('PowerShell version: {0}' -f $PSVersionTable.PSVersion) -ForegroundColor Green
    Write-Host ('Command tree entries: {0}' -f @($script:{{S}}_cmdTree).Count) -ForegroundColor Green
    Write-Host ('Flag parameters: {0}' -f @($script:{{S}}_flagParams).Count) -ForegroundColor Green
    Write-Host ('Fuzzy matching: {0}' -f $script:{{S}}_FUZZY_COMPLETION_ENABLED) -ForegroundColor Green
    Write-Host ('Candidate limit: {0}' -f $script:{{S}}_FUZZY_MAX_CANDIDATES) -ForegroundColor Green
    Write-Host ('Cache entries: {0}/{1}' -f $script:{{S}}_fuzzyCache.Count, $script:{{S}}_FUZZY_CACHE_MAX_SIZE) -ForegroundColor Green
}

Register-ArgumentCompleter -Native -CommandName $script:{{S}}_commandName -ScriptBlock $script:{{S}}_scriptBlock

# Also complete the name without its extension, e.g. "tool" for "tool.exe"
$script:{{S}}_withoutExt = [System.IO.Path]::GetFileNameWithoutExtension($script:{{S}}_commandName)
if ($script:{{S}}_withoutExt -and $script:{{S}}_withoutExt -cne $script:{{S}}_commandName) {
    Register-ArgumentCompleter -Native -CommandName $script:{{S}}_withoutExt -ScriptBlock $script:{{S}}_scriptBlock
}
"""
